"""Unit tests for JSON event output extraction."""

from __future__ import annotations

import json

from cli_bridge.application.output_extractor import extract


def _event(text, kind="text"):
    return json.dumps({"type": kind, "part": {"text": text}})


class TestExtract:
    def test_passthrough_when_not_structured(self):
        raw = _event("hello")
        assert extract(raw, False) == raw

    def test_collects_text_events(self):
        raw = "\n".join([_event("Hello"), _event("world")])
        assert extract(raw, True) == "Hello\nworld"

    def test_skips_other_event_types(self):
        raw = "\n".join([
            json.dumps({"type": "step_start", "part": {}}),
            _event("answer"),
            _event("ignored", kind="tool_use"),
            json.dumps({"type": "step_finish"}),
        ])
        assert extract(raw, True) == "answer"

    def test_mixed_plain_text_and_events(self):
        raw = "Loading model...\n" + _event("the answer") + "\nnot { json\n"
        assert extract(raw, True) == "the answer"

    def test_blank_lines_ignored(self):
        raw = "\n\n" + _event("a") + "\n   \n" + _event("b") + "\n"
        assert extract(raw, True) == "a\nb"

    def test_falls_back_to_raw_without_text_events(self):
        raw = "plain output only"
        assert extract(raw, True) == raw

    def test_malformed_shapes_skipped(self):
        raw = "\n".join([
            json.dumps({"type": "text", "part": "nope"}),
            json.dumps({"type": "text", "part": {"text": 5}}),
            json.dumps(["type", "text"]),
            json.dumps("text"),
        ])
        assert extract(raw, True) == raw

    def test_deeply_nested_line_skipped(self):
        raw = "[" * 100000 + "\n" + _event("hi")
        assert extract(raw, True) == "hi"

    def test_empty_text_fragment_kept(self):
        raw = "\n".join([_event(""), _event("x")])
        assert extract(raw, True) == "\nx"

    def test_empty_output(self):
        assert extract("", True) == ""
