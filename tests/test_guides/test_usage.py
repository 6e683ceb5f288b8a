"""Tests for per-node usage guides."""

import pytest

from fieldguide.core.models import NodeUsageGuide
from fieldguide.guides.usage import get_usage_guide, list_usage_node_types, load_usage_guides


class TestUsageGuides:
    def test_known_node(self) -> None:
        guide = get_usage_guide("schedule")
        assert isinstance(guide, NodeUsageGuide)
        assert "HH:MM" in guide.overview
        assert "cron" in guide.outputs
        assert guide.tips

    @pytest.mark.parametrize("node_type", ["unknown_node", "Schedule", "", None, 7])
    def test_unknown_or_malformed_node_type(self, node_type) -> None:
        assert get_usage_guide(node_type) is None

    def test_list_is_sorted(self) -> None:
        node_types = list_usage_node_types()
        assert node_types == sorted(node_types)
        assert {"manual_trigger", "webhook", "google_gemini", "slack_message"} <= set(node_types)

    def test_loaded_once(self) -> None:
        assert load_usage_guides() is load_usage_guides()

    def test_mapping_is_read_only(self) -> None:
        with pytest.raises(TypeError):
            load_usage_guides()["new"] = NodeUsageGuide(overview="x")  # type: ignore[index]

    def test_to_dict_uses_lists(self) -> None:
        data = get_usage_guide("manual_trigger").to_dict()
        assert isinstance(data["outputs"], list)
        assert data["example"].startswith("Connect → OpenAI GPT")

    @pytest.mark.parametrize("node_type", ["interval", "stripe", "telegram", "postgresql", "ai_agent", "notion"])
    def test_integration_nodes_documented(self, node_type: str) -> None:
        guide = get_usage_guide(node_type)
        assert guide is not None
        assert guide.overview
        assert guide.outputs

    def test_every_guide_has_overview(self) -> None:
        assert len(list_usage_node_types()) > 200
        for node_type, guide in load_usage_guides().items():
            assert guide.overview, node_type
