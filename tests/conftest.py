"""Shared fixtures for metrix tests."""
import copy

import pytest

from metrix.core.loader import encode_payload, materialize


@pytest.fixture(autouse=True)
def metrix_config(tmp_path, monkeypatch):
    """Point every config layer at a temporary directory for every test.

    This ensures tests never read or write the real ~/.config/metrix or a
    .metrix.toml in the working directory.
    """
    config_dir = tmp_path / "metrix-config"
    global_path = config_dir / "config.toml"
    project_path = tmp_path / ".metrix.toml"

    for var in ("METRIX_THEME", "METRIX_PLAIN", "METRIX_PAYLOAD", "METRIX_DEBUG"):
        monkeypatch.delenv(var, raising=False)

    import metrix.core.config_service as config_service
    monkeypatch.setattr(config_service, "_global_config_dir", lambda: config_dir)
    monkeypatch.setattr(config_service, "_global_config_path", lambda: global_path)
    monkeypatch.setattr(config_service, "_project_config_path", lambda: project_path)
    config_service.reset_config_service()

    yield {"global": global_path, "project": project_path}

    config_service.reset_config_service()
    from metrix import ui
    ui.set_plain_mode(False)


def _method(name, complexity=None, *, access="public", doc="true", loc=10, nesting=1,
            params=None, nested="false", patterns=None):
    data = {
        "metadata": {
            "name": name,
            "signature": f"{name}(x: Int): String",
            "accessModifier": access,
            "linesOfCode": loc,
            "isNested": nested,
            "declarationType": "def",
        },
        "hasScaladoc": doc,
        "nestingDepth": nesting,
        "parameterStats": params or {"totalParams": 1, "paramLists": 1},
        "patternMatchingStats": patterns or {},
        "branchDensityStats": {"branches": 2, "densityPer100": 20.0},
    }
    if complexity is not None:
        data["complexity"] = complexity
    return data


def _member(name, decl, *, access="public", doc="true", loc=5, complexity=None):
    data = {
        "metadata": {
            "name": name,
            "signature": f"{decl} {name}",
            "accessModifier": access,
            "linesOfCode": loc,
            "declarationType": decl,
        },
        "hasScaladoc": doc,
    }
    if complexity is not None:
        data["complexity"] = complexity
    return data


def _rollup(loc=0, functions=0, public=0, private=0, size=0, **extra):
    rollup = {
        "totalCount": extra.pop("count", 1),
        "coreStats": {
            "totalLoc": loc,
            "totalFunctions": functions,
            "totalPublicFunctions": public,
            "totalPrivateFunctions": private,
            "totalFileSizeBytes": size,
        },
    }
    rollup.update(extra)
    return rollup


SAMPLE_DOCUMENT = {
    "metadata": {
        "name": "demo",
        "description": "Demo project",
        "version": "1.2.0",
        "organization": "com.example",
        "scalaVersion": "3.3.1",
        "crossScalaVersions": ["3.3.1", "2.13.12"],
        "licenses": "Apache-2.0",
        "homepage": "https://example.com/demo",
        "apiURL": "",
        "developers": ["Ada", "Linus"],
        "startYear": 2020,
    },
    "rollup": {
        "totalCount": 3,
        "averageFileSizeBytes": 2048,
        "scalaDocCoveragePercentage": 62.5,
        "totalDocumentedPublicSymbols": 5,
        "deprecatedSymbolsDensityPercentage": 12.5,
        "publicReturnTypeExplicitness": 87.5,
        "avgCyclomaticComplexity": 8.857,
        "maxCyclomaticComplexity": 21,
        "avgNestingDepth": 1.5,
        "maxNestingDepth": 4,
        "coreStats": {
            "totalLoc": 300,
            "totalFunctions": 7,
            "totalPublicFunctions": 5,
            "totalPrivateFunctions": 2,
            "totalPublicSymbols": 8,
            "totalDeprecatedSymbols": 1,
            "totalFileSizeBytes": 6144,
        },
        "inlineAndImplicitStats": {"inlineMethods": 2},
        "branchDensityStats": {"densityPer100": 4.2},
    },
    "packageStats": [
        {
            "metadata": {"name": "com.example.util"},
            "rollup": _rollup(loc=60, functions=2, public=2, private=0, size=1024),
            "fileStats": [
                {
                    "metadata": {
                        "fileName": "Strings.scala",
                        "filePath": "src/main/scala/com/example/util/Strings.scala",
                        "linesOfCode": 60,
                        "fileSizeBytes": 1024,
                        "packageName": "com.example.util",
                    },
                    "rollup": _rollup(functions=2, public=2),
                    "methodStats": [
                        _method("trim", 5),
                        _method("pad"),
                    ],
                    "memberStats": [],
                },
            ],
        },
        {
            "metadata": {"name": "com.example.core"},
            "rollup": _rollup(loc=240, functions=5, public=3, private=2, size=5120),
            "fileStats": [
                {
                    "metadata": {
                        "fileName": "Parser.scala",
                        "filePath": "src/main/scala/com/example/core/Parser.scala",
                        "linesOfCode": 180,
                        "fileSizeBytes": 4096,
                        "packageName": "com.example.core",
                    },
                    "rollup": _rollup(
                        functions=3, public=2, private=1,
                        returnTypeExplicitness=75.0,
                        inlineAndImplicitStats={"inlineMethods": 1, "givenInstances": 2},
                    ),
                    "methodStats": [
                        _method(
                            "parse", 12, doc="false", loc=80, nesting=4,
                            params={"totalParams": 6, "paramLists": 1},
                        ),
                        _method("tokenize", 3, access="private", doc="false", loc=30),
                        _method("validate", 21, loc=45),
                    ],
                    "memberStats": [
                        _member("Parser", "class", loc=170),
                        _member("cache", "val", access="private", doc="false", loc=2),
                    ],
                },
                {
                    "metadata": {
                        "fileName": "Lexer.scala",
                        "filePath": "src/main/scala/com/example/core/Lexer.scala",
                        "linesOfCode": 60,
                        "fileSizeBytes": 1024,
                        "packageName": "com.example.core",
                    },
                    "rollup": _rollup(functions=2, public=1, private=1),
                    "methodStats": [
                        _method("next", 1, loc=5),
                        _method("peek", 20, access="private", loc=40),
                    ],
                    "memberStats": [],
                },
            ],
        },
        {
            "metadata": {"name": "com.example.empty"},
            "rollup": _rollup(),
            "fileStats": [],
        },
    ],
}


@pytest.fixture
def sample_document():
    """A decoded metrics document with three packages and seven methods."""
    return copy.deepcopy(SAMPLE_DOCUMENT)


@pytest.fixture
def dataset(sample_document):
    """The sample document materialized into a Dataset."""
    return materialize(sample_document)


@pytest.fixture
def payload(sample_document):
    """The sample document as a base64 gzip payload."""
    return encode_payload(sample_document)


@pytest.fixture
def payload_file(tmp_path, payload):
    """The sample payload written to a file."""
    path = tmp_path / "metrics.b64"
    path.write_text(payload)
    return path
