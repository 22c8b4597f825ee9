import sprout.context as context


def test_raw_text_context_is_deterministic() -> None:
    first = context.raw_text_context("Add dark mode to settings")
    second = context.raw_text_context("  Add dark mode to settings\n")

    assert first == second
    assert first.id.startswith("prompt-")
    assert len(first.id) == len("prompt-") + 8
    assert first.title == "Add dark mode to settings"
    assert first.description == "Add dark mode to settings"
    assert first.slug == "add-dark-mode-to-settings"
    assert first.url is None
    assert first.labels == ()
    assert first.source_branch is None


def test_raw_text_context_differs_per_prompt() -> None:
    assert context.raw_text_context("a").id != context.raw_text_context("b").id


def test_raw_text_context_without_sluggable_text() -> None:
    ctx = context.raw_text_context("!!!")

    assert ctx.slug is None
    assert ctx.title == "!!!"
