"""Tests for metrix.models."""
from metrix.models import Dataset, Method, Member, parse_bool
from metrix.errors import FileNotFoundInPackageError, PackageNotFoundError

import pytest


class TestParseBool:
    def test_native_true(self):
        assert parse_bool(True) is True

    def test_string_true(self):
        assert parse_bool("true") is True

    @pytest.mark.parametrize("value", [False, "false", "True", "yes", 1, None, ""])
    def test_everything_else_is_false(self, value):
        assert parse_bool(value) is False


class TestDeclarations:
    def test_method_fields(self, dataset):
        parse = dataset.get_file("com.example.core", "Parser.scala").methods[0]
        assert isinstance(parse, Method)
        assert parse.name == "parse"
        assert parse.complexity == 12
        assert parse.nesting_depth == 4
        assert parse.parameters.total_params == 6
        assert parse.has_scaladoc is False
        assert parse.is_nested is False

    def test_missing_complexity_defaults_to_one(self, dataset):
        pad = dataset.get_file("com.example.util", "Strings.scala").methods[1]
        assert pad.complexity_value is None
        assert pad.complexity == 1

    def test_member_is_not_method(self, dataset):
        parser = dataset.get_file("com.example.core", "Parser.scala").members[0]
        assert isinstance(parser, Member)
        assert not isinstance(parser, Method)
        assert parser.kind == "member"
        assert parser.declaration_type == "class"
        assert parser.has_scaladoc is True

    def test_name_falls_back_to_signature(self):
        m = Method.from_dict({"metadata": {"signature": "render[A](x: A): String"}})
        assert m.name == "render"

    def test_numeric_strings_are_parsed(self):
        m = Method.from_dict({
            "metadata": {"signature": "f()", "linesOfCode": "1,204"},
            "complexity": "7",
            "nestingDepth": "n/a",
        })
        assert m.lines_of_code == 1204
        assert m.complexity == 7
        assert m.nesting_depth == 0

    def test_access_modifier_defaults_to_public(self):
        m = Member.from_dict({"metadata": {"signature": "val x", "accessModifier": ""}})
        assert m.access_modifier == "public"


class TestDataset:
    def test_package_names_keep_document_order(self, dataset):
        assert dataset.package_names == ["com.example.util", "com.example.core", "com.example.empty"]

    def test_get_package_miss(self, dataset):
        with pytest.raises(PackageNotFoundError) as exc_info:
            dataset.get_package("com.nope")
        assert "com.example.util" in str(exc_info.value)
        assert exc_info.value.context["package"] == "com.nope"

    def test_get_file_miss(self, dataset):
        with pytest.raises(FileNotFoundInPackageError):
            dataset.get_file("com.example.core", "Nope.scala")

    def test_iter_methods(self, dataset):
        refs = list(dataset.iter_methods())
        assert len(refs) == dataset.method_count() == 7
        assert {r.package for r in refs} == {"com.example.util", "com.example.core"}
        pad = next(r for r in refs if r.name == "pad")
        assert pad.complexity is None

    def test_unique_files_same_path_first_wins(self, sample_document):
        dup = dict(sample_document["packageStats"][1]["fileStats"][0])
        dup["metadata"] = dict(dup["metadata"], linesOfCode=999)
        sample_document["packageStats"][0]["fileStats"].append(dup)
        ds = Dataset.from_dict(sample_document)
        files = {f.file_name: f for f in ds.unique_files()}
        assert len(files) == 3
        assert files["Parser.scala"].lines_of_code == 999

    def test_unique_files_keeps_same_name_in_other_package(self, sample_document):
        twin = {"metadata": {"fileName": "Parser.scala", "filePath": "src/util/Parser.scala", "linesOfCode": 7}}
        sample_document["packageStats"][0]["fileStats"].append(twin)
        ds = Dataset.from_dict(sample_document)
        parsers = [f for f in ds.unique_files() if f.file_name == "Parser.scala"]
        assert sorted(f.lines_of_code for f in parsers) == [7, 180]

    def test_meta(self, dataset):
        assert dataset.meta.name == "demo"
        assert dataset.meta.get("homepage") == "https://example.com/demo"
        assert dataset.meta.get("developers") == ["Ada", "Linus"]
        assert dataset.meta.get("startYear") == 2020

    def test_display_path(self, dataset):
        f = dataset.get_file("com.example.util", "Strings.scala")
        assert f.display_path.endswith("util/Strings.scala")
