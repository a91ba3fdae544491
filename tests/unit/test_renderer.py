"""Tests for the dynamic UI renderer."""

import asyncio

import pytest

from appspec import ActionType, AppDescription, parse_description
from conftest import FakeExecutor
from renderer import (
    ActionExecutionError,
    ButtonPhase,
    DynamicRenderer,
    ExecutionState,
    REQUIRED_MESSAGE,
    UNKNOWN_ERROR,
)


def two_input_app() -> AppDescription:
    return parse_description(
        {
            "components": [
                {"id": "name_input", "type": "INPUT_TEXT", "label": "Name", "validation": {"required": True}},
                {"id": "style_input", "type": "INPUT_TEXT", "label": "Style", "validation": {"minLength": 3}},
                {
                    "id": "make_button",
                    "type": "BUTTON",
                    "label": "Make",
                    "action": "GENERATE_IMAGE",
                    "triggers": ["name_input", "style_input"],
                },
                {"id": "text_out", "type": "OUTPUT_TEXT", "displaysFor": "make_button"},
                {"id": "image_out", "type": "OUTPUT_IMAGE", "displaysFor": "make_button"},
            ]
        }
    )


async def start_held_invoke(renderer: DynamicRenderer, button_id: str) -> asyncio.Task:
    """Start an invoke whose executor call stays pending until released."""
    task = asyncio.create_task(renderer.invoke(button_id))
    await asyncio.sleep(0)
    return task


# ============================================================================
# End-to-end flow
# ============================================================================

@pytest.mark.unit
async def test_topic_writer_flow(topic_app):
    executor = FakeExecutor("A paragraph about volcanoes.")
    renderer = DynamicRenderer(executor, topic_app)

    tree = renderer.render_tree()
    assert [child.id for child in tree.children] == ["main_title", "intro", "topic_input", "go_button"]

    # Blank required field blocks the action
    assert await renderer.invoke("go_button") is False
    assert executor.calls == []
    assert renderer.state.errors["topic_input"] == REQUIRED_MESSAGE
    assert renderer.is_button_disabled("go_button") is True

    renderer.set_input_value("topic_input", "volcanoes")
    assert "topic_input" not in renderer.state.errors
    assert renderer.is_button_disabled("go_button") is False

    assert await renderer.invoke("go_button") is True
    assert executor.calls == [(ActionType.GENERATE_TEXT, {"topic_input": "volcanoes"})]
    assert renderer.state.output_values["go_button"] == "A paragraph about volcanoes."

    node = renderer.render_tree().find("result_output")
    assert node is not None
    assert node.kind == "output_panel"
    assert node.props["title"] == "Result"
    assert node.children[0].kind == "text"
    assert node.children[0].props["text"] == "A paragraph about volcanoes."


@pytest.mark.unit
def test_typing_past_max_length_disables_button(topic_app, fake_executor):
    renderer = DynamicRenderer(fake_executor, topic_app)
    renderer.set_input_value("topic_input", "x" * 21)

    assert renderer.state.errors["topic_input"] == "Cannot be more than 20 characters long."
    assert renderer.is_button_disabled("go_button") is True

    node = renderer.render(topic_app.get("topic_input"))
    assert node.props["invalid"] is True
    assert node.props["value"] == "x" * 21
    assert node.props["max_length"] == 20
    assert node.props["required"] is True


# ============================================================================
# Execution states
# ============================================================================

@pytest.mark.unit
async def test_loading_state_and_reentrancy(topic_app):
    executor = FakeExecutor()
    executor.hold = True
    renderer = DynamicRenderer(executor, topic_app)
    renderer.set_input_value("topic_input", "tides")

    task = await start_held_invoke(renderer, "go_button")

    assert renderer.state.execution("go_button").in_flight is True
    assert renderer.button_phase("go_button") is ButtonPhase.EXECUTING
    assert renderer.is_button_disabled("go_button") is True

    output = renderer.render(topic_app.get("result_output"))
    assert output.children[0].kind == "loader"
    button = renderer.render(topic_app.get("go_button"))
    assert button.props["loading"] is True
    assert button.props["disabled"] is True

    # Second press while in flight is refused
    assert await renderer.invoke("go_button") is False
    assert len(executor.calls) == 1

    executor.gates[0].set_result("Tides are caused by the moon.")
    assert await task is True
    assert renderer.button_phase("go_button") is ButtonPhase.IDLE
    assert renderer.state.output_values["go_button"] == "Tides are caused by the moon."


@pytest.mark.unit
async def test_failure_keeps_previous_output(topic_app):
    executor = FakeExecutor("first result", ActionExecutionError("Quota exceeded"))
    renderer = DynamicRenderer(executor, topic_app)
    renderer.set_input_value("topic_input", "bees")

    assert await renderer.invoke("go_button") is True
    assert await renderer.invoke("go_button") is False

    assert renderer.state.output_values["go_button"] == "first result"
    assert renderer.state.execution("go_button") == ExecutionState(in_flight=False, last_error="Quota exceeded")

    output = renderer.render(topic_app.get("result_output"))
    assert output.children[0].kind == "error"
    assert output.children[0].props["text"] == "Quota exceeded"


@pytest.mark.unit
async def test_success_clears_last_error(topic_app):
    executor = FakeExecutor(RuntimeError("flaky"), "recovered")
    renderer = DynamicRenderer(executor, topic_app)
    renderer.set_input_value("topic_input", "bees")

    await renderer.invoke("go_button")
    assert renderer.state.execution("go_button").last_error == "flaky"

    await renderer.invoke("go_button")
    assert renderer.state.execution("go_button").last_error is None
    assert renderer.render(topic_app.get("result_output")).children[0].props["text"] == "recovered"


@pytest.mark.unit
async def test_exception_without_message_uses_generic_text(topic_app):
    renderer = DynamicRenderer(FakeExecutor(RuntimeError()), topic_app)
    renderer.set_input_value("topic_input", "bees")

    await renderer.invoke("go_button")

    assert renderer.state.execution("go_button").last_error == UNKNOWN_ERROR


@pytest.mark.unit
async def test_empty_string_result_still_renders(topic_app):
    renderer = DynamicRenderer(FakeExecutor(""), topic_app)
    renderer.set_input_value("topic_input", "silence")

    assert await renderer.invoke("go_button") is True

    output = renderer.render(topic_app.get("result_output"))
    assert output is not None
    assert output.children[0].props["text"] == ""


@pytest.mark.unit
def test_idle_output_renders_nothing(topic_app, fake_executor):
    renderer = DynamicRenderer(fake_executor, topic_app)
    assert renderer.render(topic_app.get("result_output")) is None


@pytest.mark.unit
async def test_cancelled_invoke_returns_to_idle(topic_app):
    executor = FakeExecutor()
    executor.hold = True
    renderer = DynamicRenderer(executor, topic_app)
    renderer.set_input_value("topic_input", "owls")

    task = await start_held_invoke(renderer, "go_button")
    task.cancel()
    with pytest.raises(asyncio.CancelledError):
        await task

    assert renderer.state.execution("go_button").in_flight is False
    assert "go_button" not in renderer.state.output_values


# ============================================================================
# Initialize and stale results
# ============================================================================

@pytest.mark.unit
async def test_result_after_initialize_is_dropped(topic_app):
    executor = FakeExecutor()
    executor.hold = True
    renderer = DynamicRenderer(executor, topic_app)
    renderer.set_input_value("topic_input", "comets")

    task = await start_held_invoke(renderer, "go_button")
    renderer.initialize(topic_app)
    executor.gates[0].set_result("late result")

    assert await task is False
    assert dict(renderer.state.output_values) == {}
    assert dict(renderer.state.execution_state) == {}
    assert renderer.render(topic_app.get("result_output")) is None


@pytest.mark.unit
async def test_failure_after_initialize_is_dropped(topic_app):
    executor = FakeExecutor()
    executor.hold = True
    renderer = DynamicRenderer(executor, topic_app)
    renderer.set_input_value("topic_input", "comets")

    task = await start_held_invoke(renderer, "go_button")
    renderer.initialize(topic_app)
    executor.gates[0].set_exception(ActionExecutionError("too late"))

    assert await task is False
    assert renderer.state.execution("go_button").last_error is None


@pytest.mark.unit
def test_initialize_resets_even_identical_description(topic_app, fake_executor):
    renderer = DynamicRenderer(fake_executor, topic_app)
    renderer.set_input_value("topic_input", "")
    generation = renderer.generation

    renderer.initialize(topic_app)

    assert renderer.generation == generation + 1
    assert dict(renderer.state.input_values) == {}
    assert dict(renderer.state.errors) == {}


# ============================================================================
# Triggers and bundles
# ============================================================================

@pytest.mark.unit
async def test_all_trigger_errors_shown_at_once(fake_executor):
    app = two_input_app()
    renderer = DynamicRenderer(fake_executor, app)
    renderer.set_input_value("style_input", "ab")

    assert await renderer.invoke("make_button") is False

    assert dict(renderer.state.errors) == {
        "name_input": REQUIRED_MESSAGE,
        "style_input": "Must be at least 3 characters long.",
    }
    assert fake_executor.calls == []


@pytest.mark.unit
async def test_bundle_uses_raw_values_in_trigger_order():
    executor = FakeExecutor("data:image/jpeg;base64,AAAA")
    app = two_input_app()
    renderer = DynamicRenderer(executor, app)
    renderer.set_input_value("style_input", "  watercolor ")
    renderer.set_input_value("name_input", " Rex ")

    assert await renderer.invoke("make_button") is True

    action, inputs = executor.calls[0]
    assert action is ActionType.GENERATE_IMAGE
    assert list(inputs.items()) == [("name_input", " Rex "), ("style_input", "  watercolor ")]


@pytest.mark.unit
async def test_fan_out_outputs_share_one_result():
    executor = FakeExecutor("data:image/jpeg;base64,AAAA")
    app = two_input_app()
    renderer = DynamicRenderer(executor, app)
    renderer.set_input_value("name_input", "Rex")
    renderer.set_input_value("style_input", "pixel art")
    await renderer.invoke("make_button")

    text_node = renderer.render(app.get("text_out"))
    image_node = renderer.render(app.get("image_out"))

    assert text_node.children[0].props["text"] == "data:image/jpeg;base64,AAAA"
    assert image_node.props["title"] == "Generated Image"
    assert image_node.children[0].kind == "image"
    assert image_node.children[0].props == {"src": "data:image/jpeg;base64,AAAA", "alt": "Generated"}


@pytest.mark.unit
async def test_dangling_trigger_sends_empty_value():
    executor = FakeExecutor("ok")
    app = parse_description(
        {
            "components": [
                {
                    "id": "lonely_button",
                    "type": "BUTTON",
                    "label": "Go",
                    "action": "GENERATE_TEXT",
                    "triggers": ["missing_input"],
                }
            ]
        }
    )
    renderer = DynamicRenderer(executor, app)

    assert await renderer.invoke("lonely_button") is True
    assert executor.calls == [(ActionType.GENERATE_TEXT, {"missing_input": ""})]


@pytest.mark.unit
async def test_unknown_button_is_noop(topic_app, fake_executor):
    renderer = DynamicRenderer(fake_executor, topic_app)
    before = renderer.state

    assert await renderer.invoke("no_such_button") is False
    assert renderer.state is before
    assert renderer.is_button_disabled("no_such_button") is True


@pytest.mark.unit
def test_unknown_input_is_ignored(topic_app, fake_executor):
    renderer = DynamicRenderer(fake_executor, topic_app)
    renderer.set_input_value("go_button", "text")
    renderer.set_input_value("nope", "text")

    assert dict(renderer.state.input_values) == {}


# ============================================================================
# State and projection
# ============================================================================

@pytest.mark.unit
def test_state_snapshots_are_immutable(topic_app, fake_executor):
    renderer = DynamicRenderer(fake_executor, topic_app)
    snapshot = renderer.state

    renderer.set_input_value("topic_input", "lava")

    assert dict(snapshot.input_values) == {}
    assert renderer.state.input_values["topic_input"] == "lava"
    with pytest.raises(TypeError):
        renderer.state.input_values["topic_input"] = "changed"


@pytest.mark.unit
def test_render_tree_passes_theme_through(topic_app, fake_executor):
    renderer = DynamicRenderer(fake_executor, topic_app)
    tree = renderer.render_tree()

    assert tree.kind == "column"
    assert tree.props["theme"] == {"colors": {"primary": "#6366f1"}, "cornerRadius": 8}


@pytest.mark.unit
def test_static_components(topic_app, fake_executor):
    renderer = DynamicRenderer(fake_executor, topic_app)

    title = renderer.render(topic_app.get("main_title"))
    intro = renderer.render(topic_app.get("intro"))

    assert title.kind == "heading"
    assert title.props == {"text": "Topic Writer", "level": 1}
    assert intro.kind == "paragraph"
    assert intro.props["text"] == "Write a paragraph about anything."


@pytest.mark.unit
def test_render_node_to_dict(topic_app, fake_executor):
    renderer = DynamicRenderer(fake_executor, topic_app)
    data = renderer.render_tree().to_dict()

    assert data["kind"] == "column"
    assert data["children"][3] == {
        "kind": "button",
        "id": "go_button",
        "props": {"label": "Go", "action": "GENERATE_TEXT", "loading": False, "disabled": False},
    }


@pytest.mark.unit
def test_empty_renderer_renders_empty_column(fake_executor):
    renderer = DynamicRenderer(fake_executor)
    tree = renderer.render_tree()

    assert tree.children == ()
    assert renderer.generation == 0


def two_button_app() -> AppDescription:
    return parse_description(
        {
            "components": [
                {"id": "a", "type": "BUTTON", "label": "A", "action": "GENERATE_TEXT", "triggers": []},
                {"id": "b", "type": "BUTTON", "label": "B", "action": "GENERATE_TEXT", "triggers": []},
                {"id": "a_out", "type": "OUTPUT_TEXT", "displaysFor": "a"},
                {"id": "b_out", "type": "OUTPUT_TEXT", "displaysFor": "b"},
            ]
        }
    )


@pytest.mark.unit
async def test_different_buttons_run_independently():
    executor = FakeExecutor()
    executor.hold = True
    renderer = DynamicRenderer(executor, two_button_app())

    task_a = await start_held_invoke(renderer, "a")
    task_b = await start_held_invoke(renderer, "b")

    assert len(executor.calls) == 2
    assert renderer.button_phase("a") is ButtonPhase.EXECUTING
    assert renderer.button_phase("b") is ButtonPhase.EXECUTING

    executor.gates[1].set_result("B")
    assert await task_b is True
    assert renderer.button_phase("b") is ButtonPhase.IDLE
    assert renderer.button_phase("a") is ButtonPhase.EXECUTING
    assert dict(renderer.state.output_values) == {"b": "B"}

    executor.gates[0].set_result("A")
    assert await task_a is True
    assert dict(renderer.state.output_values) == {"a": "A", "b": "B"}


@pytest.mark.unit
def test_output_bound_to_missing_button_renders_nothing(fake_executor):
    app = parse_description(
        {
            "components": [
                {"id": "heading", "type": "TITLE", "content": "Gallery"},
                {"id": "orphan_image", "type": "OUTPUT_IMAGE", "displaysFor": "nope"},
                {"id": "orphan_text", "type": "OUTPUT_TEXT", "displaysFor": "nope"},
            ]
        }
    )
    renderer = DynamicRenderer(fake_executor, app)

    assert app.dangling_references() == [("orphan_image", "nope"), ("orphan_text", "nope")]
    assert renderer.render(app.get("orphan_image")) is None
    assert renderer.render(app.get("orphan_text")) is None
    assert [child.id for child in renderer.render_tree().children] == ["heading"]
