"""Tests for the chat-assistant prompt builder and slider-command parser."""

from economy_lab.assistant import (
    apply_slider_changes,
    build_system_prompt,
    parse_slider_changes,
    strip_slider_commands,
)
from economy_lab.config import ModelParams
from economy_lab.engine import run_simulation


def test_prompt_reflects_latest_state(baseline_history, sliders):
    prompt = build_system_prompt(baseline_history, sliders)
    latest = baseline_history[-1]

    assert "Year 2035" in prompt
    assert f"GDP Index: {latest.gdp_index:.1f}" in prompt
    assert "Food Price Index" in prompt
    for event in latest.event_log[-3:]:
        assert event in prompt
    assert "ai_capability" in prompt
    assert "SLIDER_CHANGE" in prompt


def test_prompt_uses_variant_label(sliders):
    params = ModelParams(disruption_variant="tech_layoff")
    history = run_simulation(sliders, params, 2)
    assert "Tech Layoff Index" in build_system_prompt(history, sliders, params)


def test_parse_slider_changes():
    text = (
        "Raising capability now.\n"
        'SLIDER_CHANGE: {"key": "aiCapability", "value": 1.4}\n'
        'SLIDER_CHANGE: {"key": "regulation", "value": 0.2}\n'
        "SLIDER_CHANGE: {not json}\n"
        'SLIDER_CHANGE: {"key": "warp", "value": 1}\n'
        'SLIDER_CHANGE: {"key": "transfers", "value": "high"}\n'
        'SLIDER_CHANGE: {"key": "energy_cost", "value": -0.9}\n'
    )
    assert parse_slider_changes(text) == [
        ("ai_capability", 1.0),
        ("regulation", 0.2),
        ("energy_cost", -0.5),
    ]


def test_parse_ignores_text_without_commands():
    assert parse_slider_changes("Unemployment is rising because of automation.") == []


def test_parse_skips_non_string_keys():
    assert parse_slider_changes('SLIDER_CHANGE: {"key": ["a"], "value": 1}') == []


def test_strip_slider_commands():
    text = 'Sure.\nSLIDER_CHANGE: {"key": "transfers", "value": 0.8}\nThat should help.'
    assert strip_slider_commands(text) == "Sure.\nThat should help."


def test_apply_slider_changes(sliders):
    updated = apply_slider_changes(sliders, [("transfers", 0.8), ("regulation", 0.1)])

    assert updated.transfers == 0.8
    assert updated.regulation == 0.1
    assert updated.ai_capability == sliders.ai_capability
    assert apply_slider_changes(sliders, []) is sliders
