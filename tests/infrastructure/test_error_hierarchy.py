import pytest

from jobwindow.errors import (
    ApiError,
    ApplicationError,
    DomainError,
    InfrastructureError,
    JobFailedError,
    JobWindowError,
    NotFoundError,
    ServerError,
    TransportError,
    UploadValidationError,
    message_from_payload,
)


def test_layers_share_base():
    assert issubclass(DomainError, JobWindowError)
    assert issubclass(InfrastructureError, JobWindowError)
    assert issubclass(ApplicationError, JobWindowError)
    assert issubclass(UploadValidationError, DomainError)
    assert issubclass(TransportError, InfrastructureError)
    assert issubclass(NotFoundError, ApiError)
    assert issubclass(JobFailedError, ApplicationError)


@pytest.mark.parametrize(
    "status, expected",
    [(404, NotFoundError), (500, ServerError), (502, ServerError), (400, ApiError)],
)
def test_from_response_picks_subclass(status, expected):
    error = ApiError.from_response(status, None, "fallback")
    assert type(error) is expected
    assert error.status == status
    assert error.message == "fallback"


def test_not_found_is_distinct_from_server_error():
    assert not isinstance(ApiError.from_response(404, None, "x"), ServerError)
    assert not isinstance(ApiError.from_response(500, None, "x"), NotFoundError)


@pytest.mark.parametrize(
    "payload, expected",
    [
        ({"detail": [{"msg": "field required"}]}, "field required"),
        ({"detail": "Job not found"}, "Job not found"),
        ({"error": "bad"}, "bad"),
        ({"detail": []}, None),
        ("plain text", None),
        (None, None),
    ],
)
def test_message_from_payload(payload, expected):
    assert message_from_payload(payload) == expected
