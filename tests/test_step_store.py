"""Tests for the browser step store."""

from __future__ import annotations

import pytest

from capture_studio.core.errors import DuplicateStepError, EmptyLabel, StepNotFoundError
from capture_studio.core.ir.model import (
    ListStep,
    ScreenshotStep,
    SelectorDescriptor,
    TextStep,
)
from capture_studio.core.store.steps import BrowserStepStore


def _text(step_id: str, label: str = "") -> TextStep:
    return TextStep(id=step_id, selector=SelectorDescriptor("h1"), label=label)


class TestBrowserStepStore:
    def test_add_keeps_capture_order(self):
        store = BrowserStepStore()
        store.add_step(_text("a"))
        store.add_step(ScreenshotStep(id="b"))
        store.add_step(_text("c"))

        assert [s.id for s in store.all_steps()] == ["a", "b", "c"]

    def test_duplicate_id_is_a_programming_error(self):
        store = BrowserStepStore()
        store.add_step(_text("a"))

        with pytest.raises(DuplicateStepError):
            store.add_step(ScreenshotStep(id="a"))
        assert len(store) == 1

    def test_all_steps_is_a_snapshot(self):
        store = BrowserStepStore()
        store.add_step(_text("a"))
        snapshot = store.all_steps()
        store.add_step(_text("b"))

        assert isinstance(snapshot, tuple)
        assert [s.id for s in snapshot] == ["a"]
        # restartable
        assert list(snapshot) == list(snapshot)

    def test_add_then_delete_restores_prior_content(self):
        store = BrowserStepStore()
        store.add_step(_text("a"))
        store.add_step(_text("b"))
        before = store.all_steps()

        store.add_step(_text("c"))
        store.delete_step("c")

        assert store.all_steps() == before

    def test_delete_unknown_id_is_noop(self):
        store = BrowserStepStore()
        store.add_step(_text("a"))
        store.delete_step("missing")
        store.delete_step("missing")

        assert [s.id for s in store.all_steps()] == ["a"]

    def test_ids_stay_unique_across_add_and_delete(self):
        store = BrowserStepStore()
        for i in range(5):
            store.add_step(_text(str(i)))
        store.delete_step("2")
        store.add_step(_text("2"))
        with pytest.raises(DuplicateStepError):
            store.add_step(_text("4"))

        ids = [s.id for s in store.all_steps()]
        assert len(ids) == len(set(ids))

    def test_update_label_does_not_confirm(self):
        store = BrowserStepStore()
        store.add_step(_text("a"))
        store.update_text_label("a", "title")

        step = store.get("a")
        assert step.label == "title"
        assert step.confirmed is False

    def test_confirm_requires_trimmed_label(self):
        store = BrowserStepStore()
        store.add_step(_text("a", label="  "))

        with pytest.raises(EmptyLabel) as exc:
            store.confirm_text_step("a")
        assert exc.value.step_id == "a"
        assert store.get("a").confirmed is False

        store.update_text_label("a", "price")
        store.confirm_text_step("a")
        assert store.get("a").confirmed is True

    def test_text_operations_reject_other_kinds(self):
        store = BrowserStepStore()
        store.add_step(ScreenshotStep(id="s"))

        with pytest.raises(StepNotFoundError):
            store.update_text_label("s", "x")
        with pytest.raises(StepNotFoundError):
            store.confirm_text_step("nope")

    def test_add_screenshot_step(self):
        store = BrowserStepStore()
        step = store.add_screenshot_step(full_page=True)

        assert store.all_steps() == (step,)
        assert step.full_page is True
        assert step.kind == "screenshot"

    def test_delete_kind(self):
        store = BrowserStepStore()
        store.add_step(_text("a"))
        store.add_step(ScreenshotStep(id="s"))
        store.add_step(ListStep(id="l", list_selector=".item"))

        store.delete_kind("text")

        assert [s.kind for s in store.all_steps()] == ["screenshot", "list"]


class TestListFields:
    def test_upsert_merges_fields(self):
        store = BrowserStepStore()
        store.upsert_list_step("l", ".item", {"title": SelectorDescriptor("h2")})
        store.upsert_list_step("l", ".item", {"price": SelectorDescriptor(".price")})

        (step,) = store.all_steps()
        assert set(step.fields) == {"title", "price"}

    def test_rename_field(self):
        store = BrowserStepStore()
        store.upsert_list_step(
            "l",
            ".item",
            {"title": SelectorDescriptor("h2"), "price": SelectorDescriptor(".p")},
        )
        store.rename_list_field("l", "title", " name ")

        assert set(store.get("l").fields) == {"name", "price"}
        assert store.get("l").fields["name"].selector == "h2"

    def test_rename_rejects_empty_and_taken_labels(self):
        store = BrowserStepStore()
        store.upsert_list_step(
            "l",
            ".item",
            {"title": SelectorDescriptor("h2"), "price": SelectorDescriptor(".p")},
        )

        with pytest.raises(EmptyLabel):
            store.rename_list_field("l", "title", "   ")
        with pytest.raises(DuplicateStepError):
            store.rename_list_field("l", "title", "price")
        with pytest.raises(StepNotFoundError):
            store.rename_list_field("l", "missing", "x")
        assert set(store.get("l").fields) == {"title", "price"}

    def test_remove_field_is_idempotent(self):
        store = BrowserStepStore()
        store.upsert_list_step("l", ".item", {"title": SelectorDescriptor("h2")})
        store.remove_list_field("l", "title")
        store.remove_list_field("l", "title")

        assert store.get("l").fields == {}

    def test_upsert_trims_labels(self):
        store = BrowserStepStore()
        store.upsert_list_step("l", ".item", {" title ": SelectorDescriptor("h2")})
        store.upsert_list_step("l", ".item", {"title": SelectorDescriptor("h3")})

        assert store.get("l").fields == {"title": SelectorDescriptor("h3")}

    def test_upsert_rejects_blank_and_colliding_labels(self):
        store = BrowserStepStore()

        with pytest.raises(EmptyLabel):
            store.upsert_list_step("l", ".item", {"  ": SelectorDescriptor("h2")})
        with pytest.raises(DuplicateStepError):
            store.upsert_list_step(
                "l",
                ".item",
                {"a": SelectorDescriptor("h2"), "a ": SelectorDescriptor("h3")},
            )
        assert len(store) == 0
