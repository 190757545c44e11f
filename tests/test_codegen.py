"""Tests for rendering and importing generated API packages."""

from __future__ import annotations

import ast
import datetime
from pathlib import Path
from types import ModuleType
from typing import Any

import pytest

from discovery_client_generator.assembler import assemble
from discovery_client_generator.codegen_ast import (
    ModuleLayout,
    render_api_package_init,
    render_client_module,
    render_model_module,
    render_model_package_init,
    render_request_module,
)
from discovery_client_generator.discovery import parse_description
from discovery_client_generator.model_types import GeneratedApi
from discovery_client_generator.module_loading import import_generated_module
from discovery_client_generator.runtime import AbstractClientRequest, AbstractJsonClient
from discovery_client_generator.writer import WriteError, package_dir, write_api_package

from .fixture_helpers import load_fixture


def _write_and_import(output_dir: Path, api: GeneratedApi) -> ModuleType:
    write_api_package(output_dir=output_dir, api=api)
    return import_generated_module(output_dir=output_dir, module_name=api.package)


def _rendered_sources(api: GeneratedApi) -> dict[str, str]:
    layout = ModuleLayout.for_api(api)
    sources = {
        layout.module_of(model.name): render_model_module(model, layout, "tasks:v1")
        for model in api.models
    }
    sources[api.model_package] = render_model_package_init(api, layout)
    sources[layout.request_module] = render_request_module(api, layout)
    sources[layout.client_module] = render_client_module(api, layout)
    sources[api.package] = render_api_package_init(api, layout)
    return sources


@pytest.fixture(name="tasks_api")
def fixture_tasks_api() -> GeneratedApi:
    return assemble(load_fixture("tasks.v1.json"), "generated")


@pytest.fixture(name="tasks_package")
def fixture_tasks_package(tmp_path: Path, tasks_api: GeneratedApi) -> ModuleType:
    return _write_and_import(tmp_path, tasks_api)


def test_rendered_modules_are_valid_python(tasks_api: GeneratedApi) -> None:
    """Every rendered module parses and starts with a module docstring."""
    sources = _rendered_sources(tasks_api)
    assert set(sources) == {
        "generated.tasks",
        "generated.tasks.client",
        "generated.tasks.request",
        "generated.tasks.model",
        "generated.tasks.model.task",
        "generated.tasks.model.tasks",
        "generated.tasks.model.task_list",
        "generated.tasks.model.task_lists",
    }
    for module_name, source in sources.items():
        tree = ast.parse(source, filename=module_name)
        assert ast.get_docstring(tree), module_name


def test_client_module_refers_to_models_through_the_model_package(
    tasks_api: GeneratedApi,
) -> None:
    """Method classes subclass the request base parameterized by a model."""
    source = render_client_module(tasks_api, ModuleLayout.for_api(tasks_api))
    assert "from . import model" in source
    assert "from .request import TasksRequest" in source
    assert "class Move(TasksRequest[model.Task]):" in source
    assert "class Clear(TasksRequest[None]):" in source
    assert "DEFAULT_BASE_URL = DEFAULT_ROOT_URL + DEFAULT_SERVICE_PATH" in source


def test_model_module_defers_sibling_imports(tasks_api: GeneratedApi) -> None:
    """Models import sibling models only while type checking."""
    layout = ModuleLayout.for_api(tasks_api)
    task = tasks_api.models[0]
    source = render_model_module(task, layout, "tasks:v1")
    tree = ast.parse(source)
    guarded = [node for node in tree.body if isinstance(node, ast.If)]
    assert len(guarded) == 1
    assert ast.unparse(guarded[0].test) == "TYPE_CHECKING"
    assert ast.unparse(guarded[0].body[0]) == "from .task_list import TaskList"


def test_write_creates_package_layout(tmp_path: Path, tasks_api: GeneratedApi) -> None:
    """Parent packages get empty ``__init__`` files; each model gets a module."""
    api_dir = write_api_package(output_dir=tmp_path, api=tasks_api)
    assert api_dir == package_dir(tmp_path, "generated.tasks")
    assert (tmp_path / "generated" / "__init__.py").read_text(encoding="utf-8") == ""
    assert sorted(path.name for path in api_dir.iterdir()) == [
        "__init__.py",
        "client.py",
        "model",
        "request.py",
    ]
    assert sorted(path.name for path in (api_dir / "model").iterdir()) == [
        "__init__.py",
        "task.py",
        "task_list.py",
        "task_lists.py",
        "tasks.py",
    ]


def test_write_refuses_existing_api_package(tmp_path: Path, tasks_api: GeneratedApi) -> None:
    """An API package is never written over an existing directory."""
    write_api_package(output_dir=tmp_path, api=tasks_api)
    with pytest.raises(WriteError, match="already exists"):
        write_api_package(output_dir=tmp_path, api=tasks_api)


def test_generated_models_validate_wire_payloads(tasks_package: ModuleType) -> None:
    """Models populate from wire names and coerce scalar formats."""
    model = tasks_package.client.model
    task = model.Task.model_validate(
        {
            "id": "t1",
            "class": "work",
            "status": "completed",
            "priority": "high",
            "due": "2024-01-02T03:04:05+00:00",
            "completedDate": "2024-01-03",
            "sizeBytes": "12",
            "metadata": {"owner": "me"},
            "links": [{"type": "related", "link": "https://example.com"}],
            "parentList": {"id": "l1", "title": "Inbox"},
        }
    )
    assert task.class__ == "work"
    assert task.status is model.Task.Status.completed
    assert task.priority is model.Task.Priority.high
    assert task.completedDate == datetime.date(2024, 1, 3)
    assert task.sizeBytes == 12
    assert task.links[0].link == "https://example.com"
    assert isinstance(task.parentList, model.TaskList)
    assert task.title is None


def test_rfc3339_fields_serialize_to_seconds(tasks_package: ModuleType) -> None:
    """Date-times documented as RFC3339 dump without fractional seconds."""
    model = tasks_package.client.model
    moment = datetime.datetime(2024, 1, 2, 3, 4, 5, 678000, tzinfo=datetime.timezone.utc)
    task = model.Task(due=moment, updated=moment)
    dumped = task.model_dump(mode="json", by_alias=True, exclude_none=True)
    assert dumped["due"] == "2024-01-02T03:04:05+00:00"
    assert dumped["updated"] != dumped["due"]


def test_generated_enum_documents_values(tasks_package: ModuleType) -> None:
    """Enum docstrings list the documented values in order."""
    priority = tasks_package.client.model.Task.Priority
    assert [member.value for member in priority] == ["low", "high"]
    assert priority.__doc__ == "Values:\n- low: Can wait.\n- high: Do it now."


def test_client_constants_and_base_url(tasks_package: ModuleType) -> None:
    """The client exposes API metadata and defaults to the derived base URL."""
    client = tasks_package.Tasks()
    assert isinstance(client, AbstractJsonClient)
    assert client.API_TITLE == "Tasks API"
    assert client.base_url == "https://tasks.example.com/tasks/v1/"
    assert tasks_package.Tasks(base_url="http://localhost/").base_url == "http://localhost/"


def test_factories_build_method_requests(tasks_package: ModuleType) -> None:
    """Resource factories construct method requests bound to the client."""
    client = tasks_package.Tasks()
    request = client.tasks().move("list-1", "task-9")
    assert isinstance(request, AbstractClientRequest)
    assert isinstance(request, tasks_package.TasksRequest)
    assert request.client is client
    assert request.http_method == "POST"
    assert request.uri_template == "lists/{tasklist}/tasks/{task}/move"
    assert request.response_type is tasks_package.client.model.Task
    assert request.content is None
    assert request.parameters() == {"tasklist": "list-1", "task": "task-9"}


def test_optional_and_global_parameters_use_wire_names(tasks_package: ModuleType) -> None:
    """Optional method and global parameters appear once set."""
    request = tasks_package.Tasks().tasks().list("list-1")
    request.showCompleted = False
    request.orderBy = type(request).OrderBy.due
    request.prettyPrint = False
    params: dict[str, Any] = request.parameters()
    assert params == {
        "prettyPrint": False,
        "tasklist": "list-1",
        "showCompleted": False,
        "orderBy": type(request).OrderBy.due,
    }


def test_body_is_forwarded_as_content(tasks_package: ModuleType) -> None:
    """Methods with a request body pass it through to the request base."""
    model = tasks_package.client.model
    body = model.Task(title="Write tests")
    request = tasks_package.Tasks().tasks().insert("list-1", body)
    assert request.content is body
    assert "content" not in request.parameters()


def test_void_methods_have_no_response_type(tasks_package: ModuleType) -> None:
    """Methods without a response pass no response type."""
    request = tasks_package.Tasks().tasklists().delete("list-1")
    assert request.response_type is None
    assert request.http_method == "DELETE"


@pytest.mark.parametrize("value", [None, ""])
def test_missing_required_parameter_fails_fast(tasks_package: ModuleType, value: Any) -> None:
    """Required parameters reject absent and empty values at construction."""
    with pytest.raises(ValueError, match="Required parameter tasklist must be specified."):
        tasks_package.Tasks().tasks().move(value, "task-9")


def test_sub_resource_factories(tasks_package: ModuleType) -> None:
    """Sub-resources are reachable through their parent resource."""
    request = tasks_package.Tasks().tasks().comments().list("list-1", "task-9")
    assert request.uri_template == "lists/{tasklist}/tasks/{task}/comments"


def test_keyword_names_keep_wire_names(tmp_path: Path) -> None:
    """Keyword fields, parameters, and enum values stay usable and round-trip."""
    api = assemble(load_fixture("import_export.v1.json"), "")
    package = _write_and_import(tmp_path, api)
    model = package.client.model

    job = model.Job.model_validate(
        {"global": "yes", "from": "2024-05-06", "state": "in progress", "counts": [[1, 2], [3]]}
    )
    assert job.global__ == "yes"
    assert job.from__ == datetime.date(2024, 5, 6)
    assert job.state is model.Job.State.in_progress_2
    assert model.Job.State.def__.value == "def"
    assert model.Job.State.x_2fa.value == "2fa"
    assert job.model_dump(by_alias=True, exclude_none=True)["from"] == datetime.date(2024, 5, 6)

    client = package.ImportExport()
    request = client.import__().import__("2024-05-06", job)
    request.async__ = True
    assert request.parameters() == {"from": "2024-05-06", "async": True}
    assert client.ping().uri_template == "ping"


def test_reserved_model_field_names_are_suffixed(tmp_path: Path) -> None:
    """Properties clashing with model members keep their wire name as alias."""
    description = parse_description(
        {
            "name": "reserved",
            "version": "v1",
            "schemas": {
                "Document": {
                    "id": "Document",
                    "type": "object",
                    "properties": {
                        "copy": {"type": "string"},
                        "json": {"type": "boolean"},
                        "name": {"type": "string"},
                    },
                }
            },
        }
    )
    package = _write_and_import(tmp_path, assemble(description, "gen"))
    document = package.client.model.Document.model_validate(
        {"copy": "c", "json": True, "name": "n"}
    )
    assert document.copy_field == "c"
    assert document.json_field is True
    assert document.name == "n"
    assert document.model_dump(by_alias=True) == {"copy": "c", "json": True, "name": "n"}


@pytest.fixture(name="storage_api")
def fixture_storage_api() -> GeneratedApi:
    return assemble(load_fixture("storage_lite.v1.json"), "generated")


def test_non_identifier_wire_names_render_valid_python(storage_api: GeneratedApi) -> None:
    """Names such as ``$.xgafv`` and ``@type`` never reach the source verbatim."""
    for module, source in _rendered_sources(storage_api).items():
        ast.parse(source, filename=module)
        assert "$.xgafv:" not in source
        assert "@type:" not in source


def test_non_identifier_global_parameters_keep_wire_names(
    tmp_path: Path, storage_api: GeneratedApi
) -> None:
    """Sanitized request attributes map back to their wire names."""
    package = _write_and_import(tmp_path, storage_api)
    request_class = package.StorageLiteRequest
    assert request_class.PARAMETER_KEYS["xgafv"] == "$.xgafv"
    assert request_class.PARAMETER_KEYS["upload_protocol"] == "upload_protocol"
    assert request_class.Xgafv.x_2.value == "2"

    request = package.StorageLite().objects().list("bucket-1")
    request.xgafv = request_class.Xgafv.x_2
    request.upload_protocol = "raw"
    request.projection = type(request).Projection.noAcl
    assert request.parameters() == {
        "$.xgafv": request_class.Xgafv.x_2,
        "upload_protocol": "raw",
        "bucket": "bucket-1",
        "projection": type(request).Projection.noAcl,
    }


def test_non_identifier_properties_use_aliases(tmp_path: Path, storage_api: GeneratedApi) -> None:
    """Model properties that are not identifiers validate and dump by wire name."""
    package = _write_and_import(tmp_path, storage_api)
    payload = {"@type": "type.example.com/Object", "_etag": "e1", "content-type": "text/plain"}
    stored = package.client.model.StoredObject.model_validate({**payload, "size": "12"})
    assert stored.type == "type.example.com/Object"
    assert stored.etag == "e1"
    assert stored.content_type == "text/plain"
    assert stored.size == 12
    assert stored.model_dump(by_alias=True, exclude_none=True) == {**payload, "size": 12}


def test_parameters_named_like_constructor_arguments(
    tmp_path: Path, storage_api: GeneratedApi
) -> None:
    """Parameters called ``client``, ``self`` or ``content`` get distinct attributes."""
    package = _write_and_import(tmp_path, storage_api)
    client = package.StorageLite()

    get = client.objects().get("bucket-1", "object-1", "client-1")
    assert get.client is client
    assert get.client_ == "client-1"
    get.self_ = "self-1"
    assert get.parameters() == {
        "bucket": "bucket-1",
        "object": "object-1",
        "client": "client-1",
        "self": "self-1",
    }
    with pytest.raises(ValueError, match="Required parameter client must be specified."):
        client.objects().get("bucket-1", "object-1", "")

    body = package.client.model.StoredObject(name="notes.txt")
    insert = client.objects().insert("bucket-1", body)
    insert.content_ = "inline"
    assert insert.content is body
    assert insert.parameters() == {"bucket": "bucket-1", "content": "inline"}


def test_write_renders_before_creating_directories(
    tmp_path: Path, tasks_api: GeneratedApi, monkeypatch: pytest.MonkeyPatch
) -> None:
    """A rendering failure leaves no partial API package behind."""

    def _fail(*_args: Any) -> str:
        raise RuntimeError("render failed")

    monkeypatch.setattr("discovery_client_generator.writer.render_client_module", _fail)
    with pytest.raises(RuntimeError, match="render failed"):
        write_api_package(output_dir=tmp_path, api=tasks_api)
    assert not package_dir(tmp_path, tasks_api.package).exists()
