import marimo

__generated_with = "0.13.10"
app = marimo.App(width="medium", app_title="Devotionals")


# ---------------------------------------------------------------------------
# Bootstrap: paths, config, session
# ---------------------------------------------------------------------------


@app.cell
def _setup():
    import logging
    import sys
    from pathlib import Path

    import marimo as mo

    _ROOT = Path(__file__).parent.parent
    _SRC = _ROOT / "src"
    if str(_SRC) not in sys.path:
        sys.path.insert(0, str(_SRC))

    from devosync import DEVOTIONALS_SYNCED, DevotionalDraft, NoticeKind, SyncConfig, SyncSession

    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(name)s %(levelname)s %(message)s")

    _config_path = _ROOT / "devosync.toml"
    config = (
        SyncConfig.from_toml(_config_path)
        if _config_path.exists()
        else SyncConfig.from_env(queue_path=str(_ROOT / ".devosync" / "queue.duckdb"))
    )
    return DEVOTIONALS_SYNCED, DevotionalDraft, NoticeKind, SyncSession, config, mo


@app.cell
def _notifier(NoticeKind, mo):
    class ToastNotifier:
        """Shows devosync notices as marimo toasts."""

        def notify(self, message, kind=NoticeKind.INFO):
            mo.status.toast(
                message,
                kind="danger" if kind is NoticeKind.ERROR else None,
            )

    return (ToastNotifier,)


@app.cell
async def _session(DEVOTIONALS_SYNCED, SyncSession, ToastNotifier, config, mo):
    session = SyncSession.create(config, notifier=ToastNotifier())

    pending_count, set_pending_count = mo.state(session.queue.pending_count())
    session.events.subscribe(
        DEVOTIONALS_SYNCED, lambda: set_pending_count(session.queue.pending_count())
    )

    await session.start(watch=True)
    return pending_count, session, set_pending_count


# ---------------------------------------------------------------------------
# Authoring form
# ---------------------------------------------------------------------------


@app.cell
def _form(mo):
    form = (
        mo.md(
            """
            **New devotional**

            {title}

            {scripture}

            {text}

            {date}

            {transmission_link}
            """
        )
        .batch(
            title=mo.ui.text(label="Title", full_width=True),
            scripture=mo.ui.text(label="Scripture", full_width=True),
            text=mo.ui.text_area(label="Reflection", full_width=True, rows=8),
            date=mo.ui.date(label="Date"),
            transmission_link=mo.ui.text(label="Live stream link", full_width=True),
        )
        .form(submit_button_label="Publish", clear_on_submit=True)
    )
    form
    return (form,)


@app.cell
async def _submit(DevotionalDraft, form, mo, session, set_pending_count):
    mo.stop(form.value is None)

    _values = form.value
    _draft = DevotionalDraft(
        title=_values["title"],
        text=_values["text"],
        date=_values["date"].isoformat() if _values["date"] else None,
        scripture=_values["scripture"] or None,
        transmission_link=_values["transmission_link"] or None,
    )
    save_result = await session.orchestrator.save(_draft)
    set_pending_count(session.queue.pending_count())

    if save_result.is_offline:
        _status = mo.callout(mo.md("Saved on this device; it will be published when you're back online."), kind="warn")
    elif save_result.success:
        _status = mo.callout(mo.md("Published."), kind="success")
    else:
        _status = mo.callout(mo.md("The devotional was rejected. Check the fields and try again."), kind="danger")
    _status
    return (save_result,)


# ---------------------------------------------------------------------------
# Pending queue
# ---------------------------------------------------------------------------


@app.cell
def _sync_button(mo):
    sync_button = mo.ui.run_button(label="Sync now")
    return (sync_button,)


@app.cell
async def _sync(mo, session, set_pending_count, sync_button):
    mo.stop(not sync_button.value)
    sync_result = await session.orchestrator.sync_all()
    set_pending_count(session.queue.pending_count())
    return (sync_result,)


@app.cell
def _pending(mo, pending_count, session, sync_button):
    _count = pending_count()
    _badge = mo.md(f"**Pending devotionals: {_count}**")
    _table = (
        mo.ui.table(session.queue.to_frame(), selection=None)
        if _count
        else mo.md("_Everything is synced._")
    )
    mo.vstack([mo.hstack([_badge, sync_button], justify="space-between"), _table], gap="8px")
    return


if __name__ == "__main__":
    app.run()
