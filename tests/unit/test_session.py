from __future__ import annotations

import logging
from io import StringIO
from unittest.mock import MagicMock

import pytest

from sku_upload.clients.base import RemoteCallError, StaticCartProvider
from sku_upload.models import NoticeSeverity, RunStatus, UploadedFile, ValidationOutcome
from sku_upload.services.session import UploadSession, log_notifier

VALID_CSV = "SKU,Quantity\nA1,5\n"


def _csv(text: str = VALID_CSV) -> UploadedFile:
    return UploadedFile(name="items.csv", media_type="text/csv", content=text)


def test_process_publishes_result_and_notifies_once(validation_client, submission_client):
    notifier = MagicMock()
    session = UploadSession(
        validation_client, submission_client, StaticCartProvider("cart-1"), notifier=notifier
    )
    result = session.process(_csv())
    assert session.result is result
    assert session.processing is False
    notifier.assert_called_once()
    notice = notifier.call_args.args[0]
    assert notice.severity is NoticeSeverity.SUCCESS
    assert notice.title == "File Processing Complete"


def test_rejected_file_clears_flag_and_notifies_error(validation_client, submission_client):
    notifier = MagicMock()
    session = UploadSession(validation_client, submission_client, notifier=notifier)
    upload = UploadedFile(name="items.txt", media_type="text/plain", content=VALID_CSV)
    result = session.process(upload)
    assert result.status is RunStatus.REJECTED
    assert session.processing is False
    notice = notifier.call_args.args[0]
    assert notice.severity is NoticeSeverity.ERROR
    assert "File not supported" in notice.message


def test_failure_paths_are_not_reported_as_success(validation_client, submission_client):
    validation_client.validate.side_effect = RemoteCallError("down")
    notifier = MagicMock()
    session = UploadSession(validation_client, submission_client, notifier=notifier)
    session.process(_csv())
    assert notifier.call_args.args[0].severity is NoticeSeverity.ERROR


def test_row_errors_notify_warning(validation_client, submission_client):
    notifier = MagicMock()
    session = UploadSession(validation_client, submission_client, notifier=notifier)
    session.process(_csv("SKU,Quantity\nA1,x\nA2,2"))
    notice = notifier.call_args.args[0]
    assert notice.severity is NoticeSeverity.WARNING
    assert "1 error(s)" in notice.message


def test_processing_flag_set_during_run(validation_client, submission_client):
    seen: list[bool] = []
    session = UploadSession(validation_client, submission_client, notifier=MagicMock())

    def _validate(text: str):
        seen.append(session.processing)
        return validation_client.validate.return_value

    validation_client.validate.side_effect = _validate
    session.process(_csv())
    assert seen == [True]
    assert session.processing is False


def test_stale_run_is_not_published(validation_client, submission_client):
    notifier = MagicMock()
    session = UploadSession(
        validation_client, submission_client, StaticCartProvider("cart-1"), notifier=notifier
    )
    newer_results = []

    def _submit(cart_id: str, text: str):
        # 送信中に新しいファイルが選択された
        if not newer_results:
            submission_client.submit.side_effect = None
            newer_results.append(session.process(_csv("SKU,Quantity\nB1,1\n")))
        return ValidationOutcome(success=True, errors=())

    submission_client.submit.side_effect = _submit
    stale = session.process(_csv())

    assert stale.parsed_rows[0].sku == "A1"
    assert session.result is newer_results[0]
    assert session.result.parsed_rows[0].sku == "B1"
    assert notifier.call_count == 1
    assert session.processing is False


def test_cancel_invalidates_in_flight_run(validation_client, submission_client):
    notifier = MagicMock()
    session = UploadSession(validation_client, submission_client, notifier=notifier)

    def _validate(text: str):
        session.cancel()
        return validation_client.validate.return_value

    validation_client.validate.side_effect = _validate
    session.process(_csv())
    assert session.result is None
    assert session.processing is False
    notifier.assert_not_called()


def test_unexpected_exception_clears_flag(validation_client, submission_client):
    notifier = MagicMock()
    session = UploadSession(validation_client, submission_client, notifier=notifier)
    upload = MagicMock()
    upload.is_csv = True
    upload.name = "boom.csv"
    upload.read_text.side_effect = KeyboardInterrupt
    with pytest.raises(KeyboardInterrupt):
        session.process(upload)
    assert session.processing is False
    notifier.assert_not_called()


def test_raising_cart_provider_still_notifies(validation_client, submission_client):
    provider = MagicMock()
    provider.get_cart_id.side_effect = RuntimeError("cart service exploded")
    notifier = MagicMock()
    session = UploadSession(validation_client, submission_client, provider, notifier=notifier)
    result = session.process(_csv())
    assert session.result is result
    assert session.processing is False
    submission_client.submit.assert_not_called()
    notifier.assert_called_once()


def test_log_notifier_levels():
    from sku_upload.logging.init import LabeledFormatter
    from sku_upload.models import CompletionNotice

    captured = StringIO()
    handler = logging.StreamHandler(captured)
    handler.setFormatter(LabeledFormatter())
    logger = logging.getLogger("sku_upload.services.session")
    previous_level = logger.level
    logger.setLevel(logging.INFO)
    logger.addHandler(handler)
    try:
        log_notifier(CompletionNotice("T", "ok", NoticeSeverity.SUCCESS))
        log_notifier(CompletionNotice("T", "bad", NoticeSeverity.ERROR))
    finally:
        logger.removeHandler(handler)
        logger.setLevel(previous_level)

    assert captured.getvalue().strip().split("\n") == ["INFO T: ok", "ERROR T: bad"]
