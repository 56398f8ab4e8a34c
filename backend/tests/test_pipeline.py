"""
Tests for the per-document pipeline and concurrent batch parsing.

Byte acquisition and PDF decoding are mocked at the pipeline module level.
"""

import asyncio
from unittest.mock import AsyncMock, patch

import pytest

from app.models.resume import DecodedPdf, ParsedResumePdf, UploadedResumePdf
from app.services.errors import DecodeError, FetchError, FormatError
from app.services.normalizer import TRUNCATION_MARKER
from app.services.pipeline import (
    analyze_resume_text,
    parse_resume_batch,
    parse_resume_pdf,
)


RESUME_TEXT = "李雷\r\n\r\n\r\n\r\nlei.li@example.com\r\n清华大学\x00\r\n本科"


def _file(n: int, url: str = None) -> UploadedResumePdf:
    return UploadedResumePdf(
        id=f"m1-file-{n}",
        filename=f"resume-{n}.pdf",
        url=url or f"https://cdn.example.com/{n}.pdf",
    )


class TestParseResumePdf:

    @pytest.mark.asyncio
    async def test_acquire_decode_normalize(self):
        with patch("app.services.pipeline.read_pdf_bytes", new_callable=AsyncMock, return_value=b"%PDF") as mock_read, \
             patch("app.services.pipeline.decode_pdf_bytes", return_value=DecodedPdf(page_count=2, pages=[RESUME_TEXT, ""])) as mock_decode:
            document = await parse_resume_pdf(_file(1))

        mock_read.assert_awaited_once()
        assert mock_read.call_args[0][0] == "https://cdn.example.com/1.pdf"
        mock_decode.assert_called_once_with(b"%PDF")

        assert isinstance(document, ParsedResumePdf)
        assert document.id == "m1-file-1"
        assert document.filename == "resume-1.pdf"
        assert document.page_count == 2
        assert document.text == "李雷\n\nlei.li@example.com\n清华大学\n本科"
        assert document.total_text_chars == len(document.text)

    @pytest.mark.asyncio
    async def test_blank_pdf_gives_empty_text_not_error(self):
        with patch("app.services.pipeline.read_pdf_bytes", new_callable=AsyncMock, return_value=b"%PDF"), \
             patch("app.services.pipeline.decode_pdf_bytes", return_value=DecodedPdf(page_count=1, pages=[""])):
            document = await parse_resume_pdf(_file(1))

        assert document.text == ""
        assert document.total_text_chars == 0
        assert document.page_count == 1

    @pytest.mark.asyncio
    async def test_acquisition_error_propagates(self):
        with patch("app.services.pipeline.read_pdf_bytes", new_callable=AsyncMock, side_effect=FetchError("Failed to download PDF: 403", 403)):
            with pytest.raises(FetchError):
                await parse_resume_pdf(_file(1))

    @pytest.mark.asyncio
    async def test_decode_error_propagates(self):
        with patch("app.services.pipeline.read_pdf_bytes", new_callable=AsyncMock, return_value=b"junk"), \
             patch("app.services.pipeline.decode_pdf_bytes", side_effect=DecodeError("PDF parsing failed")):
            with pytest.raises(DecodeError):
                await parse_resume_pdf(_file(1))


class TestAnalyzeResumeText:

    def test_returns_structured_and_clipped(self):
        document = ParsedResumePdf(
            filename="a.pdf", id="x", page_count=1,
            text="李雷\nlei.li@example.com", total_text_chars=21,
        )
        structured, clipped = analyze_resume_text(document, max_chars=5)

        assert structured.candidate_name == "李雷"
        assert structured.email == "lei.li@example.com"
        assert clipped.truncated is True
        assert clipped.text == "李雷\nle" + TRUNCATION_MARKER


class TestParseResumeBatch:

    @pytest.mark.asyncio
    async def test_empty_batch(self):
        assert await parse_resume_batch([]) == []

    @pytest.mark.asyncio
    async def test_results_keep_selection_order_when_completion_order_differs(self):
        delays = {"https://cdn.example.com/1.pdf": 0.05, "https://cdn.example.com/2.pdf": 0.0,
                  "https://cdn.example.com/3.pdf": 0.02}

        async def fake_read(url, client=None, timeout=None):
            await asyncio.sleep(delays[url])
            return url.encode()

        def fake_decode(data):
            return DecodedPdf(page_count=1, pages=[f"source {data.decode()}"])

        files = [_file(1), _file(2), _file(3)]
        with patch("app.services.pipeline.read_pdf_bytes", side_effect=fake_read), \
             patch("app.services.pipeline.decode_pdf_bytes", side_effect=fake_decode):
            outcomes = await parse_resume_batch(files)

        assert [o.file.id for o in outcomes] == ["m1-file-1", "m1-file-2", "m1-file-3"]
        assert all(o.ok for o in outcomes)
        assert outcomes[0].document.text == "source https://cdn.example.com/1.pdf"

    @pytest.mark.asyncio
    async def test_one_failure_does_not_affect_others(self):
        async def fake_read(url, client=None, timeout=None):
            if url.endswith("2.pdf"):
                raise FormatError("Invalid data URL format.")
            return b"%PDF"

        files = [_file(1), _file(2), _file(3)]
        with patch("app.services.pipeline.read_pdf_bytes", side_effect=fake_read), \
             patch("app.services.pipeline.decode_pdf_bytes", return_value=DecodedPdf(page_count=1, pages=["李雷"])):
            outcomes = await parse_resume_batch(files)

        assert [o.ok for o in outcomes] == [True, False, True]
        failed = outcomes[1]
        assert failed.error_code == "INVALID_DATA_URL"
        assert failed.document is None
        assert failed.structured is None
        assert outcomes[0].structured.candidate_name == "李雷"

    @pytest.mark.asyncio
    async def test_fetch_and_decode_errors_carry_codes(self):
        async def fake_read(url, client=None, timeout=None):
            if url.endswith("1.pdf"):
                raise FetchError("Failed to download PDF: 500", status_code=500)
            return b"junk"

        with patch("app.services.pipeline.read_pdf_bytes", side_effect=fake_read), \
             patch("app.services.pipeline.decode_pdf_bytes", side_effect=DecodeError("PDF parsing failed")):
            outcomes = await parse_resume_batch([_file(1), _file(2)])

        assert [o.error_code for o in outcomes] == ["FETCH_FAILED", "DECODE_FAILED"]

    @pytest.mark.asyncio
    async def test_cancelled_document_becomes_cancelled_outcome(self):
        async def fake_read(url, client=None, timeout=None):
            if url.endswith("1.pdf"):
                raise asyncio.CancelledError()
            return b"%PDF"

        with patch("app.services.pipeline.read_pdf_bytes", side_effect=fake_read), \
             patch("app.services.pipeline.decode_pdf_bytes", return_value=DecodedPdf(page_count=1, pages=["x"])):
            outcomes = await parse_resume_batch([_file(1), _file(2)])

        assert outcomes[0].error_code == "CANCELLED"
        assert outcomes[1].ok

    @pytest.mark.asyncio
    async def test_malformed_http_url_fails_only_its_document(self):
        files = [
            _file(1, url="data:application/pdf;base64,JVBERg=="),
            _file(2, url="http://[::1/cv.pdf"),
        ]
        with patch("app.services.pipeline.decode_pdf_bytes", return_value=DecodedPdf(page_count=1, pages=["李雷"])):
            outcomes = await parse_resume_batch(files)

        assert outcomes[0].ok
        assert outcomes[0].structured.candidate_name == "李雷"
        assert not outcomes[1].ok
        assert outcomes[1].error_code == "FETCH_FAILED"

    @pytest.mark.asyncio
    async def test_unexpected_errors_propagate(self):
        with patch("app.services.pipeline.read_pdf_bytes", new_callable=AsyncMock, side_effect=RuntimeError("bug")):
            with pytest.raises(RuntimeError):
                await parse_resume_batch([_file(1)])

    @pytest.mark.asyncio
    async def test_max_chars_applied_per_document(self):
        with patch("app.services.pipeline.read_pdf_bytes", new_callable=AsyncMock, return_value=b"%PDF"), \
             patch("app.services.pipeline.decode_pdf_bytes", return_value=DecodedPdf(page_count=1, pages=["a" * 50])):
            outcomes = await parse_resume_batch([_file(1)], max_chars=10)

        assert outcomes[0].clipped.truncated is True
        assert outcomes[0].clipped.text == "a" * 10 + TRUNCATION_MARKER
        # The full text is still available on the document
        assert outcomes[0].document.total_text_chars == 50

    @pytest.mark.asyncio
    async def test_shared_client_passed_to_every_download(self):
        clients = []

        async def fake_read(url, client=None, timeout=None):
            clients.append(client)
            return b"%PDF"

        with patch("app.services.pipeline.read_pdf_bytes", side_effect=fake_read), \
             patch("app.services.pipeline.decode_pdf_bytes", return_value=DecodedPdf(page_count=1, pages=["x"])):
            await parse_resume_batch([_file(1), _file(2)], timeout=3)

        assert clients[0] is not None
        assert clients[0] is clients[1]
