import base64
import io

import pytest
from fastapi.testclient import TestClient
from starlette.datastructures import UploadFile

from app import __version__
from app.config import get_settings
from app.dependencies import get_generator
from app.domain import AssembledPrompt
from app.exceptions import GenerationFailure
from app.handlers import DEFAULT_CONTENT_TYPE, _read_attachment


class DummyGenerator:
    def __init__(self) -> None:
        self.prompts: list[AssembledPrompt] = []

    async def generate(self, prompt: AssembledPrompt) -> str:
        self.prompts.append(prompt)
        return f"Explained: {prompt.prompt_text}"


class FailingGenerator:
    def __init__(self, error: Exception) -> None:
        self.error = error

    async def generate(self, prompt: AssembledPrompt) -> str:
        raise self.error


def get_test_client(app, generator=None):
    generator = generator or DummyGenerator()
    app.dependency_overrides[get_generator] = lambda: generator
    return TestClient(app), generator


def test_text_only_submission(app) -> None:
    client, generator = get_test_client(app)

    response = client.post("/api/explain", data={"text": "explain this"})

    assert response.status_code == 200
    assert response.json() == {"explanation": "Explained: explain this", "suggestions": []}
    assert generator.prompts[0].prompt_text == "explain this"
    assert generator.prompts[0].multimodal_part is None


def test_inline_text_attachment(app) -> None:
    client, generator = get_test_client(app)

    response = client.post(
        "/api/explain",
        data={"text": ""},
        files={"file": ("a.ts", b"const x = 1;", "text/plain")},
    )

    assert response.status_code == 200
    prompt = generator.prompts[0]
    assert "a.ts" in prompt.prompt_text
    assert "const x = 1;" in prompt.prompt_text
    assert prompt.multimodal_part is None


def test_image_attachment(app) -> None:
    client, generator = get_test_client(app)
    png = b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR"

    response = client.post(
        "/api/explain",
        data={"text": "what is this"},
        files={"file": ("shot.png", png, "image/png")},
    )

    assert response.status_code == 200
    prompt = generator.prompts[0]
    assert prompt.prompt_text == "what is this"
    assert prompt.multimodal_part.mime_type == "image/png"
    assert base64.b64decode(prompt.multimodal_part.data) == png


def test_image_field_alias_is_accepted(app) -> None:
    client, generator = get_test_client(app)

    response = client.post(
        "/api/explain",
        data={"text": "describe"},
        files={"image": ("doc.pdf", b"%PDF-1.4", "application/pdf")},
    )

    assert response.status_code == 200
    assert generator.prompts[0].multimodal_part.mime_type == "application/pdf"


def test_two_files_are_rejected(app) -> None:
    client, generator = get_test_client(app)

    response = client.post(
        "/api/explain",
        data={"text": "hi"},
        files=[
            ("file", ("a.txt", b"a", "text/plain")),
            ("image", ("b.png", b"b", "image/png")),
        ],
    )

    assert response.status_code == 400
    assert "error" in response.json()
    assert generator.prompts == []


def test_blank_submission_is_rejected(app) -> None:
    client, generator = get_test_client(app)

    response = client.post("/api/explain", data={"text": "   "})

    assert response.status_code == 400
    assert set(response.json()) == {"error"}
    assert generator.prompts == []


def test_missing_text_field_is_rejected(app) -> None:
    client, _ = get_test_client(app)

    response = client.post("/api/explain", data={})

    assert response.status_code == 400


def test_text_length_enforced(app) -> None:
    client, generator = get_test_client(app)

    response = client.post("/api/explain", data={"text": "a" * 5001})

    assert response.status_code == 400
    assert "5000" in response.json()["error"]
    assert generator.prompts == []


def test_generation_failure_is_uniform(app) -> None:
    client, _ = get_test_client(
        app, FailingGenerator(GenerationFailure("quota exceeded for key abc", upstream_status=429))
    )

    response = client.post("/api/explain", data={"text": "hello"})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to generate explanation"}


def test_unexpected_error_is_not_leaked(app) -> None:
    client, _ = get_test_client(app, FailingGenerator(RuntimeError("secret internals")))

    response = client.post("/api/explain", data={"text": "hello"})

    assert response.status_code == 500
    assert response.json() == {"error": "Failed to generate explanation"}


def test_invalid_utf8_attachment(app) -> None:
    client, generator = get_test_client(app)

    response = client.post(
        "/api/explain",
        data={"text": "read this"},
        files={"file": ("bad.txt", b"\xff\xfe\xfd", "text/plain")},
    )

    assert response.status_code == 422
    assert set(response.json()) == {"error"}
    assert generator.prompts == []


def test_strict_policy_rejects_unknown_types(app) -> None:
    strict = get_settings().model_copy(update={"attachment_policy": "strict"})
    app.dependency_overrides[get_settings] = lambda: strict
    client, generator = get_test_client(app)

    response = client.post(
        "/api/explain",
        data={"text": "what is inside"},
        files={"file": ("a.zip", b"PK\x03\x04", "application/zip")},
    )

    assert response.status_code == 415
    assert generator.prompts == []


def test_request_id_is_echoed(app) -> None:
    client, _ = get_test_client(app)

    response = client.post(
        "/api/explain", data={"text": "hello"}, headers={"x-request-id": "abc123"}
    )

    assert response.headers["x-request-id"] == "abc123"


def test_healthz(app) -> None:
    client, _ = get_test_client(app)

    assert client.get("/healthz").json() == {"status": "ok"}


def test_version(app) -> None:
    client, _ = get_test_client(app)

    response = client.get("/version")

    assert response.json() == {
        "version": __version__,
        "environment": get_settings().environment,
    }


def test_empty_file_part_counts_as_no_attachment(app) -> None:
    client, generator = get_test_client(app)

    response = client.post(
        "/api/explain",
        data={"text": "hello"},
        files={"file": ("", b"", "application/octet-stream")},
    )

    assert response.status_code == 200
    assert generator.prompts[0] == AssembledPrompt(prompt_text="hello")


def test_parameters_only_content_type_goes_multimodal(app) -> None:
    client, generator = get_test_client(app)

    response = client.post(
        "/api/explain",
        data={"text": ""},
        files={"file": ("a.bin", b"\x00\x01data", "; charset=utf-8")},
    )

    assert response.status_code == 200
    part = generator.prompts[0].multimodal_part
    assert part.mime_type == DEFAULT_CONTENT_TYPE
    assert base64.b64decode(part.data) == b"\x00\x01data"


@pytest.mark.asyncio
async def test_upload_without_content_type_defaults_to_octet_stream() -> None:
    upload = UploadFile(file=io.BytesIO(b"\x00\x01"), filename="blob")

    attachment = await _read_attachment(upload)

    assert attachment.content_type == DEFAULT_CONTENT_TYPE
    assert attachment.data == b"\x00\x01"


def test_malformed_form_uses_error_shape(app) -> None:
    client, generator = get_test_client(app)

    response = client.post("/api/explain", data={"text": "hi", "file": "notafile"})

    assert response.status_code == 400
    assert set(response.json()) == {"error"}
    assert "file" in response.json()["error"]
    assert generator.prompts == []
