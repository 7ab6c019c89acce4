"""Unit tests for event routing, debounced notification and schedulers."""

import asyncio
import logging
from unittest.mock import Mock, call

import pytest

from promised_models import (
    AsyncioScheduler,
    EventKey,
    ManualScheduler,
    Model,
    ModelConfig,
    ModelEvent,
)
from promised_models.events import EventEmitter


class TestEventEmitter:
    """Test the keyed listener registry."""

    @pytest.fixture
    def emitter(self):
        return EventEmitter(owner_name="test")

    @pytest.mark.unit
    def test_emit_calls_listeners_in_order(self, emitter):
        """Test listeners run in registration order with the emitted args."""
        calls = []
        emitter.on(EventKey("change"), lambda *args: calls.append(("first", args)))
        emitter.on(EventKey("change"), lambda *args: calls.append(("second", args)))

        assert emitter.emit(EventKey("change"), 1, 2) == 2
        assert calls == [("first", (1, 2)), ("second", (1, 2))]

    @pytest.mark.unit
    def test_scoped_and_unscoped_keys_are_distinct(self, emitter):
        """Test a scoped key does not receive unscoped emissions."""
        scoped = Mock()
        emitter.on(EventKey("change", "name"), scoped)
        emitter.emit(EventKey("change"))
        scoped.assert_not_called()

        emitter.emit(EventKey("change", "name"))
        scoped.assert_called_once_with()

    @pytest.mark.unit
    def test_on_is_idempotent(self, emitter):
        """Test subscribing the same listener twice keeps one subscription."""
        listener = Mock()
        emitter.on(EventKey("change"), listener)
        emitter.on(EventKey("change"), listener)
        assert emitter.count(EventKey("change")) == 1

    @pytest.mark.unit
    def test_off_matches_context(self, emitter):
        """Test off only removes the subscription made with the given context."""
        listener = Mock()
        first, second = object(), object()
        emitter.on(EventKey("change"), listener, first)
        emitter.on(EventKey("change"), listener, second)

        emitter.off(EventKey("change"), listener, first)
        assert emitter.count(EventKey("change")) == 1

    @pytest.mark.unit
    def test_off_without_callback_removes_all(self, emitter):
        """Test off with only a key clears that key."""
        emitter.on(EventKey("change"), Mock())
        emitter.on(EventKey("change"), Mock())
        emitter.off(EventKey("change"))

        assert EventKey("change") not in emitter
        assert not emitter

    @pytest.mark.unit
    def test_listener_may_unsubscribe_during_emit(self, emitter):
        """Test the listener list is snapshotted before notification."""
        second = Mock()

        def first():
            emitter.off(EventKey("change"), second)

        emitter.on(EventKey("change"), first)
        emitter.on(EventKey("change"), second)
        emitter.emit(EventKey("change"))

        second.assert_called_once()
        assert emitter.count(EventKey("change")) == 1

    @pytest.mark.unit
    def test_listener_errors_are_isolated(self, emitter, caplog):
        """Test a failing listener is logged and others still run."""
        after = Mock()
        emitter.on(EventKey("change"), Mock(side_effect=RuntimeError("boom")))
        emitter.on(EventKey("change"), after)

        with caplog.at_level(logging.ERROR):
            emitter.emit(EventKey("change"))

        after.assert_called_once()
        assert "boom" in caplog.text

    @pytest.mark.unit
    def test_listener_errors_propagate_when_configured(self):
        """Test propagate_errors re-raises listener exceptions."""
        emitter = EventEmitter(propagate_errors=True)
        emitter.on(EventKey("change"), Mock(side_effect=RuntimeError("boom")))
        with pytest.raises(RuntimeError, match="boom"):
            emitter.emit(EventKey("change"))

    @pytest.mark.unit
    def test_clear_and_len(self, emitter):
        """Test counting and clearing listeners."""
        emitter.on(EventKey("change"), Mock())
        emitter.on(EventKey("change", "name"), Mock())
        assert len(emitter) == 2
        assert emitter.has_listeners() is True

        emitter.clear()
        assert len(emitter) == 0
        assert emitter.has_listeners() is False

    @pytest.mark.unit
    def test_event_key_str(self):
        """Test the readable form of keys."""
        assert str(EventKey("change")) == "change"
        assert str(EventKey("change", "name")) == "change:name"


class TestModelSubscriptions:
    """Test on/un/trigger on models."""

    @pytest.fixture
    def model(self, scheduler):
        class Point(Model):
            schema = {"x": {"type": "string"}, "y": {"type": "string"}}

        return Point(scheduler=scheduler)

    @pytest.mark.unit
    def test_field_change_emits_scoped_then_unscoped(self, model, scheduler):
        """Test a field change triggers change:<field> before change."""
        events = []
        model.on("x", "change", lambda field: events.append(("change:x", field.name)))
        model.on("change", lambda field: events.append(("change", field.name)))

        model.set("x", "1")
        assert events == []
        scheduler.run_pending()

        assert events == [("change:x", "x"), ("change", "x")]

    @pytest.mark.unit
    def test_cross_product_subscription(self, model, scheduler):
        """Test on('x y', 'change', cb) fires once per field change."""
        scoped = Mock()
        unscoped = Mock()
        model.on("x y", "change", scoped)
        model.on("change", unscoped)

        model.set("x", "1")
        model.set("y", "2")
        scheduler.run_pending()

        assert scoped.call_args_list == [call(model.fields["x"]), call(model.fields["y"])]
        assert unscoped.call_count == 2

    @pytest.mark.unit
    def test_space_separated_events(self, model):
        """Test several event names register one subscription each."""
        listener = Mock()
        model.on("x y", "change reset", listener)

        assert model.listener_count("change", "x") == 1
        assert model.listener_count("reset", "x") == 1
        assert model.listener_count("change", "y") == 1
        assert model.listener_count("reset", "y") == 1
        assert model.listener_count("change") == 0

    @pytest.mark.unit
    def test_listener_count_rejects_blank_event(self, model):
        """Test a blank event name is a ValueError, not an IndexError."""
        with pytest.raises(ValueError, match="non-empty names"):
            model.listener_count("")
        with pytest.raises(ValueError, match="non-empty names"):
            model.listener_count("   ", "x")

    @pytest.mark.unit
    def test_enum_event_names(self, model, scheduler):
        """Test ModelEvent members are accepted as event names."""
        listener = Mock()
        model.on("x", ModelEvent.CHANGE, listener)
        model.set("x", "1")
        scheduler.run_pending()
        listener.assert_called_once_with(model.fields["x"])

    @pytest.mark.unit
    def test_un_scoped(self, model, scheduler):
        """Test un removes a scoped subscription."""
        listener = Mock()
        model.on("x y", "change", listener)
        model.un("x", "change", listener)

        model.set("x", "1")
        model.set("y", "2")
        scheduler.run_pending()

        listener.assert_called_once_with(model.fields["y"])

    @pytest.mark.unit
    def test_un_unscoped(self, model, scheduler):
        """Test un removes an unscoped subscription."""
        listener = Mock()
        model.on("change", listener)
        model.un("change", listener)

        model.set("x", "1")
        scheduler.run_pending()
        listener.assert_not_called()

    @pytest.mark.unit
    def test_un_respects_context(self, model):
        """Test a subscription made with a context needs that context to be removed."""
        listener = Mock()
        owner = object()
        model.on("change", listener, owner)

        model.un("change", listener)
        assert model.listener_count("change") == 1

        model.un("change", listener, owner)
        assert model.listener_count("change") == 0

    @pytest.mark.unit
    def test_un_all_listeners_of_event(self, model):
        """Test un with only event names clears them."""
        model.on("change", Mock())
        model.on("change", Mock())
        model.un("change")
        assert model.has_listeners() is False

    @pytest.mark.unit
    def test_trigger_custom_event(self, model):
        """Test trigger emits synchronously with arguments."""
        listener = Mock()
        model.on("saved", listener)
        model.trigger("saved", "payload")
        listener.assert_called_once_with("payload")

    @pytest.mark.unit
    def test_trigger_scoped_event(self, model):
        """Test trigger with field emits the scoped event only."""
        scoped = Mock()
        unscoped = Mock()
        model.on("x", "invalid", scoped)
        model.on("invalid", unscoped)

        model.trigger("invalid", field="x")

        scoped.assert_called_once_with()
        unscoped.assert_not_called()

    @pytest.mark.unit
    def test_revert_notifies_each_field(self, model, scheduler):
        """Test revert emits one notification per reverted field."""
        model.set({"x": "1", "y": "2"})
        scheduler.run_pending()

        listener = Mock()
        model.on("change", listener)
        model.revert()
        scheduler.run_pending()

        assert listener.call_args_list == [call(model.fields["x"]), call(model.fields["y"])]

    @pytest.mark.unit
    def test_commit_does_not_notify(self, model, scheduler):
        """Test commit schedules nothing."""
        model.set("x", "1")
        scheduler.run_pending()
        model.commit()
        assert scheduler.pending == 0

    @pytest.mark.unit
    def test_reentrant_set_from_listener(self, model, scheduler):
        """Test a listener may mutate the model during notification."""

        def mirror(field):
            model.set("y", field.get())

        model.on("x", "change", mirror)
        model.set("x", "1")
        scheduler.run_pending()

        assert model.get("y") == "1"
        assert scheduler.pending == 1

        scheduler.run_pending()
        assert scheduler.pending == 0

    @pytest.mark.unit
    def test_dispose(self, model, scheduler):
        """Test dispose drops listeners and pending notifications."""
        listener = Mock()
        model.on("change", listener)
        model.set("x", "1")
        model.dispose()

        scheduler.run_pending()
        listener.assert_not_called()
        assert model.has_listeners() is False


class TestDebounce:
    """Test notification coalescing on the asyncio loop."""

    @pytest.fixture
    def model_class(self):
        class Point(Model):
            schema = {"x": {"type": "string"}, "y": {"type": "string"}}

        return Point

    @pytest.mark.asyncio
    @pytest.mark.unit
    async def test_two_sets_one_notification(self, model_class):
        """Test synchronous sets on one field collapse into one change."""
        model = model_class()
        listener = Mock()
        model.on("x", "change", listener)

        model.set("x", "1")
        model.set("x", "2")
        listener.assert_not_called()

        await asyncio.sleep(0)
        listener.assert_called_once_with(model.fields["x"])
        assert model.get("x") == "2"

    @pytest.mark.asyncio
    @pytest.mark.unit
    async def test_each_field_notifies_separately(self, model_class):
        """Test different fields are debounced independently."""
        model = model_class()
        listener = Mock()
        model.on("change", listener)

        model.set("x", "1")
        model.set("y", "1")
        await asyncio.sleep(0)

        assert listener.call_count == 2

    @pytest.mark.asyncio
    @pytest.mark.unit
    async def test_later_task_notifies_again(self, model_class):
        """Test a change after the flush schedules a new notification."""
        model = model_class()
        listener = Mock()
        model.on("x", "change", listener)

        model.set("x", "1")
        await asyncio.sleep(0)
        model.set("x", "2")
        await asyncio.sleep(0)

        assert listener.call_count == 2

    @pytest.mark.asyncio
    @pytest.mark.unit
    async def test_set_and_revert_within_task_still_notifies_once(self, model_class):
        """Test the pending notification fires even if the value ends unchanged."""
        model = model_class()
        listener = Mock()
        model.on("x", "change", listener)

        model.set("x", "1")
        model.revert()
        await asyncio.sleep(0)

        listener.assert_called_once()

    @pytest.mark.asyncio
    @pytest.mark.unit
    async def test_notify_delay(self, model_class):
        """Test a configured delay postpones the flush."""
        model = model_class(config=ModelConfig(notify_delay=0.01))
        listener = Mock()
        model.on("change", listener)

        model.set("x", "1")
        await asyncio.sleep(0)
        listener.assert_not_called()

        await asyncio.sleep(0.05)
        listener.assert_called_once()

    @pytest.mark.unit
    def test_without_running_loop_notifies_immediately(self, model_class, caplog):
        """Test the asyncio scheduler falls back to immediate notification and warns once."""
        caplog.set_level(logging.WARNING, logger="promised_models.events.scheduler")
        model = model_class()
        listener = Mock()
        model.on("x", "change", listener)

        model.set("x", "1")
        model.set("x", "2")

        assert listener.call_count == 2
        assert model.fields["x"].change_pending is False
        warnings = [r for r in caplog.records if "ManualScheduler" in r.getMessage()]
        assert len(warnings) == 1


class TestSchedulers:
    """Test scheduler implementations directly."""

    @pytest.mark.unit
    def test_manual_scheduler_runs_queued_only(self):
        """Test callbacks scheduled during run_pending wait for the next run."""
        scheduler = ManualScheduler()
        calls = []

        def first():
            calls.append("first")
            scheduler.schedule(lambda: calls.append("second"))

        scheduler.schedule(first)
        assert scheduler.run_pending() == 1
        assert calls == ["first"]
        assert scheduler.run_pending() == 1
        assert calls == ["first", "second"]

    @pytest.mark.unit
    def test_manual_scheduler_cancel(self):
        """Test a cancelled call does not run."""
        scheduler = ManualScheduler()
        callback = Mock()
        scheduler.schedule(callback).cancel()

        assert scheduler.pending == 0
        assert scheduler.run_pending() == 0
        callback.assert_not_called()

    @pytest.mark.unit
    def test_asyncio_scheduler_rejects_negative_delay(self):
        """Test delays must not be negative."""
        with pytest.raises(ValueError):
            AsyncioScheduler(delay=-0.1)

    @pytest.mark.asyncio
    @pytest.mark.unit
    async def test_asyncio_scheduler_cancel(self):
        """Test cancelling a loop callback."""
        callback = Mock()
        AsyncioScheduler().schedule(callback).cancel()
        await asyncio.sleep(0)
        callback.assert_not_called()
