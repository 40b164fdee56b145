"""Tests for the persona prompt, image template and icon table."""

from backend.agent.icons import ICON_BANK, resolve_icons
from backend.agent.prompts import SYSTEM_PROMPT, build_image_prompt


class TestSystemPrompt:

    def test_lists_every_icon_key(self):
        for key in ICON_BANK:
            assert key in SYSTEM_PROMPT

    def test_icon_keywords_listed(self):
        wifi = ICON_BANK["wifi"]
        assert f"- wifi: {', '.join(wifi.keywords)}" in SYSTEM_PROMPT

    def test_json_examples_rendered(self):
        assert '{"reply": "...", "needsImage": false}' in SYSTEM_PROMPT
        assert "generateImage" in SYSTEM_PROMPT
        assert "{icon_keys}" not in SYSTEM_PROMPT

    def test_restart_bias_and_escalation(self):
        assert "SUGGEST RESTART" in SYSTEM_PROMPT
        assert "técnico" in SYSTEM_PROMPT


class TestImagePrompt:

    def test_wraps_description(self):
        prompt = build_image_prompt("  botón de volumen  ")
        assert "reference illustration: botón de volumen." in prompt
        assert "not a full screen" in prompt

    def test_braces_in_description_are_literal(self):
        assert "{x}" in build_image_prompt("ícono {x}")


class TestResolveIcons:

    def test_known_keys_in_order(self):
        keys = [key for key, _ in resolve_icons(["restart", "wifi"])]
        assert keys == ["restart", "wifi"]

    def test_unknown_keys_dropped(self):
        resolved = resolve_icons(["wifi", "teleporter", "settings"])
        assert [key for key, _ in resolved] == ["wifi", "settings"]

    def test_empty(self):
        assert resolve_icons(None) == []
        assert resolve_icons([]) == []

    def test_every_icon_has_glyph_and_description(self):
        for icon in ICON_BANK.values():
            assert icon.glyph
            assert icon.description
