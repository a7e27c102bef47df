"""Core data models for metrix.

The decoded metrics document is materialized once into these frozen
dataclasses. Missing numeric metrics default to 0 (complexity to 1) and
boolean-like fields pass through ``parse_bool`` at ingestion, so nothing
downstream ever sees a string boolean.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Iterator, NamedTuple, Optional, Union

from metrix.core.signature import extract_name
from metrix.errors import FileNotFoundInPackageError, PackageNotFoundError

Number = Union[int, float]


def parse_bool(value: Any) -> bool:
    """Normalize a boolean-like payload value.

    Only the native ``True`` and the string literal ``"true"`` are true.
    """
    return value is True or value == "true"


def _num(data: Optional[dict], key: str, default: Number = 0) -> Number:
    """Read a numeric metric, falling back to ``default`` when absent or invalid."""
    if not isinstance(data, dict):
        return default
    value = data.get(key)
    if isinstance(value, bool) or value is None:
        return default
    if isinstance(value, (int, float)):
        return value if math.isfinite(value) else default
    if isinstance(value, str):
        try:
            parsed = float(value.replace(",", ""))
        except ValueError:
            return default
        if not math.isfinite(parsed):
            return default
        return int(parsed) if parsed.is_integer() else parsed
    return default


def _opt_num(data: Optional[dict], key: str) -> Optional[Number]:
    """Like ``_num`` but keeps absence visible as ``None``."""
    if not isinstance(data, dict) or data.get(key) is None:
        return None
    value = _num(data, key, default=math.nan)
    return None if isinstance(value, float) and math.isnan(value) else value


def _str(data: Optional[dict], key: str, default: str = "") -> str:
    if not isinstance(data, dict):
        return default
    value = data.get(key)
    return default if value is None else str(value)


def _dict(data: Optional[dict], key: str) -> dict:
    if not isinstance(data, dict):
        return {}
    value = data.get(key)
    return value if isinstance(value, dict) else {}


def _list(data: Optional[dict], key: str) -> list:
    if not isinstance(data, dict):
        return []
    value = data.get(key)
    return value if isinstance(value, list) else []


# ── Metric bundles ──

@dataclass(frozen=True)
class PatternMatchingStats:
    matches: Number = 0
    cases: Number = 0
    guards: Number = 0
    wildcards: Number = 0
    max_nesting: Number = 0
    nested_matches: Number = 0
    avg_cases_per_match: Number = 0

    @classmethod
    def from_dict(cls, d: Optional[dict]) -> PatternMatchingStats:
        return cls(
            matches=_num(d, "matches"),
            cases=_num(d, "cases"),
            guards=_num(d, "guards"),
            wildcards=_num(d, "wildcards"),
            max_nesting=_num(d, "maxNesting"),
            nested_matches=_num(d, "nestedMatches"),
            avg_cases_per_match=_num(d, "avgCasesPerMatch"),
        )


@dataclass(frozen=True)
class BranchDensityStats:
    branches: Number = 0
    if_count: Number = 0
    case_count: Number = 0
    loop_count: Number = 0
    catch_case_count: Number = 0
    bool_ops_count: Number = 0
    density_per_100: Number = 0
    bool_ops_per_100: Number = 0

    @classmethod
    def from_dict(cls, d: Optional[dict]) -> BranchDensityStats:
        return cls(
            branches=_num(d, "branches"),
            if_count=_num(d, "ifCount"),
            case_count=_num(d, "caseCount"),
            loop_count=_num(d, "loopCount"),
            catch_case_count=_num(d, "catchCaseCount"),
            bool_ops_count=_num(d, "boolOpsCount"),
            density_per_100=_num(d, "densityPer100"),
            bool_ops_per_100=_num(d, "boolOpsPer100"),
        )


@dataclass(frozen=True)
class ParameterStats:
    total_params: Number = 0
    param_lists: Number = 0
    implicit_params: Number = 0
    implicit_param_lists: Number = 0
    using_params: Number = 0
    using_param_lists: Number = 0
    defaulted_params: Number = 0
    by_name_params: Number = 0
    vararg_params: Number = 0

    @classmethod
    def from_dict(cls, d: Optional[dict]) -> ParameterStats:
        return cls(
            total_params=_num(d, "totalParams"),
            param_lists=_num(d, "paramLists"),
            implicit_params=_num(d, "implicitParams"),
            implicit_param_lists=_num(d, "implicitParamLists"),
            using_params=_num(d, "usingParams"),
            using_param_lists=_num(d, "usingParamLists"),
            defaulted_params=_num(d, "defaultedParams"),
            by_name_params=_num(d, "byNameParams"),
            vararg_params=_num(d, "varargParams"),
        )


@dataclass(frozen=True)
class CoreStats:
    total_functions: Number = 0
    total_public_functions: Number = 0
    total_private_functions: Number = 0
    total_loc: Number = 0
    total_file_size_bytes: Number = 0
    total_public_symbols: Number = 0
    total_deprecated_symbols: Number = 0
    total_defs_vals_vars: Number = 0
    total_public_defs_vals_vars: Number = 0

    @classmethod
    def from_dict(cls, d: Optional[dict]) -> CoreStats:
        return cls(
            total_functions=_num(d, "totalFunctions"),
            total_public_functions=_num(d, "totalPublicFunctions"),
            total_private_functions=_num(d, "totalPrivateFunctions"),
            total_loc=_num(d, "totalLoc"),
            total_file_size_bytes=_num(d, "totalFileSizeBytes"),
            total_public_symbols=_num(d, "totalPublicSymbols"),
            total_deprecated_symbols=_num(d, "totalDeprecatedSymbols"),
            total_defs_vals_vars=_num(d, "totalDefsValsVars"),
            total_public_defs_vals_vars=_num(d, "totalPublicDefsValsVars"),
        )


@dataclass(frozen=True)
class InlineImplicitStats:
    inline_methods: Number = 0
    inline_vals: Number = 0
    inline_vars: Number = 0
    inline_params: Number = 0
    implicit_defs: Number = 0
    implicit_vals: Number = 0
    implicit_vars: Number = 0
    implicit_conversions: Number = 0
    given_instances: Number = 0
    given_conversions: Number = 0
    explicit_defs_vals_vars: Number = 0
    explicit_public_defs_vals_vars: Number = 0

    @classmethod
    def from_dict(cls, d: Optional[dict]) -> InlineImplicitStats:
        return cls(
            inline_methods=_num(d, "inlineMethods"),
            inline_vals=_num(d, "inlineVals"),
            inline_vars=_num(d, "inlineVars"),
            inline_params=_num(d, "inlineParams"),
            implicit_defs=_num(d, "implicitDefs"),
            implicit_vals=_num(d, "implicitVals"),
            implicit_vars=_num(d, "implicitVars"),
            implicit_conversions=_num(d, "implicitConversions"),
            given_instances=_num(d, "givenInstances"),
            given_conversions=_num(d, "givenConversions"),
            explicit_defs_vals_vars=_num(d, "explicitDefsValsVars"),
            explicit_public_defs_vals_vars=_num(d, "explicitPublicDefsValsVars"),
        )


@dataclass(frozen=True)
class Rollup:
    """Aggregate metrics at project, package or file scope."""

    total_count: Number = 0
    average_file_size_bytes: Number = 0
    scaladoc_coverage_percentage: Number = 0
    total_documented_public_symbols: Number = 0
    deprecated_symbols_density_percentage: Number = 0
    return_type_explicitness: Optional[Number] = None
    public_return_type_explicitness: Optional[Number] = None
    avg_cyclomatic_complexity: Number = 0
    max_cyclomatic_complexity: Number = 0
    avg_nesting_depth: Number = 0
    max_nesting_depth: Number = 0
    total_private_functions: Optional[Number] = None
    core: CoreStats = field(default_factory=CoreStats)
    inline_implicit: InlineImplicitStats = field(default_factory=InlineImplicitStats)
    branch_density: BranchDensityStats = field(default_factory=BranchDensityStats)

    @classmethod
    def from_dict(cls, d: Optional[dict]) -> Rollup:
        return cls(
            total_count=_num(d, "totalCount"),
            average_file_size_bytes=_num(d, "averageFileSizeBytes"),
            scaladoc_coverage_percentage=_num(d, "scalaDocCoveragePercentage"),
            total_documented_public_symbols=_num(d, "totalDocumentedPublicSymbols"),
            deprecated_symbols_density_percentage=_num(d, "deprecatedSymbolsDensityPercentage"),
            return_type_explicitness=_opt_num(d, "returnTypeExplicitness"),
            public_return_type_explicitness=_opt_num(d, "publicReturnTypeExplicitness"),
            avg_cyclomatic_complexity=_num(d, "avgCyclomaticComplexity"),
            max_cyclomatic_complexity=_num(d, "maxCyclomaticComplexity"),
            avg_nesting_depth=_num(d, "avgNestingDepth"),
            max_nesting_depth=_num(d, "maxNestingDepth"),
            total_private_functions=_opt_num(d, "totalPrivateFunctions"),
            core=CoreStats.from_dict(_dict(d, "coreStats")),
            inline_implicit=InlineImplicitStats.from_dict(_dict(d, "inlineAndImplicitStats")),
            branch_density=BranchDensityStats.from_dict(_dict(d, "branchDensityStats")),
        )

    @property
    def private_functions(self) -> Number:
        """Package-level private count; older reports only carry it in coreStats."""
        if self.total_private_functions is not None:
            return self.total_private_functions
        return self.core.total_private_functions


# ── Declarations ──

@dataclass(frozen=True)
class Member:
    """A non-executable declaration (class, trait, object, val, var, type)."""

    signature: str
    declaration_type: str = ""
    access_modifier: str = "public"
    lines_of_code: Number = 0
    has_scaladoc: bool = False
    complexity_value: Optional[Number] = None
    pattern_matching: PatternMatchingStats = field(default_factory=PatternMatchingStats)
    branch_density: BranchDensityStats = field(default_factory=BranchDensityStats)
    declared_name: str = ""

    kind = "member"

    @property
    def name(self) -> str:
        """Bare name, from the payload or parsed out of the signature."""
        return self.declared_name or extract_name(self.signature)

    @property
    def complexity(self) -> Number:
        """Cyclomatic complexity with the single-path baseline of 1."""
        return self.complexity_value or 1

    @classmethod
    def _common(cls, d: dict) -> dict:
        meta = _dict(d, "metadata")
        return dict(
            signature=_str(meta, "signature"),
            declaration_type=_str(meta, "declarationType"),
            access_modifier=_str(meta, "accessModifier", "public") or "public",
            lines_of_code=_num(meta, "linesOfCode"),
            has_scaladoc=parse_bool(d.get("hasScaladoc")),
            complexity_value=_opt_num(d, "complexity"),
            pattern_matching=PatternMatchingStats.from_dict(_dict(d, "patternMatchingStats")),
            branch_density=BranchDensityStats.from_dict(_dict(d, "branchDensityStats")),
            declared_name=_str(meta, "name"),
        )

    @classmethod
    def from_dict(cls, d: dict) -> Member:
        return cls(**cls._common(d))


@dataclass(frozen=True)
class Method(Member):
    """An executable declaration; carries nesting and parameter metrics."""

    is_nested: bool = False
    nesting_depth: Number = 0
    parameters: ParameterStats = field(default_factory=ParameterStats)

    kind = "method"

    @classmethod
    def from_dict(cls, d: dict) -> Method:
        meta = _dict(d, "metadata")
        return cls(
            **cls._common(d),
            is_nested=parse_bool(meta.get("isNested")),
            nesting_depth=_num(d, "nestingDepth"),
            parameters=ParameterStats.from_dict(_dict(d, "parameterStats")),
        )


# ── Containers ──

@dataclass(frozen=True)
class File:
    file_name: str
    file_path: str = ""
    lines_of_code: Number = 0
    file_size_bytes: Number = 0
    package_name: str = ""
    rollup: Rollup = field(default_factory=Rollup)
    members: tuple[Member, ...] = ()
    methods: tuple[Method, ...] = ()

    @property
    def display_path(self) -> str:
        """Full path for tooltips, falling back to the file name."""
        return self.file_path or self.file_name

    @classmethod
    def from_dict(cls, d: dict) -> File:
        meta = _dict(d, "metadata")
        return cls(
            file_name=_str(meta, "fileName"),
            file_path=_str(meta, "filePath"),
            lines_of_code=_num(meta, "linesOfCode"),
            file_size_bytes=_num(meta, "fileSizeBytes"),
            package_name=_str(meta, "packageName"),
            rollup=Rollup.from_dict(_dict(d, "rollup")),
            members=tuple(Member.from_dict(m) for m in _list(d, "memberStats") if isinstance(m, dict)),
            methods=tuple(Method.from_dict(m) for m in _list(d, "methodStats") if isinstance(m, dict)),
        )


@dataclass(frozen=True)
class Package:
    name: str
    rollup: Rollup = field(default_factory=Rollup)
    files: tuple[File, ...] = ()

    def find_file(self, file_name: str) -> Optional[File]:
        """Return the first file with ``file_name``, or None."""
        return next((f for f in self.files if f.file_name == file_name), None)

    @classmethod
    def from_dict(cls, d: dict) -> Package:
        return cls(
            name=_str(_dict(d, "metadata"), "name"),
            rollup=Rollup.from_dict(_dict(d, "rollup")),
            files=tuple(File.from_dict(f) for f in _list(d, "fileStats") if isinstance(f, dict)),
        )


@dataclass(frozen=True)
class ProjectMeta:
    name: str = ""
    description: str = ""
    version: str = ""
    attributes: dict = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        return self.attributes.get(key, default)

    @classmethod
    def from_dict(cls, d: Optional[dict]) -> ProjectMeta:
        d = d if isinstance(d, dict) else {}
        return cls(
            name=_str(d, "name"),
            description=_str(d, "description"),
            version=_str(d, "version"),
            attributes=dict(d),
        )


class MethodRef(NamedTuple):
    """One method flattened out of the package/file hierarchy."""

    package: str
    file: str
    name: str
    complexity: Optional[Number]


@dataclass(frozen=True)
class Dataset:
    meta: ProjectMeta
    rollup: Rollup
    packages: tuple[Package, ...] = ()

    @property
    def package_names(self) -> list[str]:
        return [p.name for p in self.packages]

    def find_package(self, name: str) -> Optional[Package]:
        return next((p for p in self.packages if p.name == name), None)

    def get_package(self, name: str) -> Package:
        """Like ``find_package`` but raises PackageNotFoundError."""
        pkg = self.find_package(name)
        if pkg is None:
            raise PackageNotFoundError(name, available=self.package_names)
        return pkg

    def get_file(self, package_name: str, file_name: str) -> File:
        """Look up a file by package and file name.

        Raises:
            PackageNotFoundError: If the package does not exist.
            FileNotFoundInPackageError: If the package has no such file.
        """
        file = self.get_package(package_name).find_file(file_name)
        if file is None:
            raise FileNotFoundInPackageError(file_name, package_name)
        return file

    def iter_methods(self) -> Iterator[MethodRef]:
        """Yield every method across all packages and files."""
        for pkg in self.packages:
            for f in pkg.files:
                pkg_name = f.package_name or pkg.name or "(unknown)"
                for m in f.methods:
                    yield MethodRef(
                        package=pkg_name,
                        file=f.file_name or "(file)",
                        name=m.name or "(method)",
                        complexity=m.complexity_value,
                    )

    def method_count(self) -> int:
        return sum(len(f.methods) for p in self.packages for f in p.files)

    def unique_files(self) -> list[File]:
        """Files across all packages, deduplicated by path (first wins).

        Same-named files in different packages are distinct entries.
        """
        seen: dict[str, File] = {}
        for pkg in self.packages:
            for f in pkg.files:
                seen.setdefault(f.file_path or f"{pkg.name}/{f.file_name}", f)
        return list(seen.values())

    @classmethod
    def from_dict(cls, d: dict) -> Dataset:
        return cls(
            meta=ProjectMeta.from_dict(d.get("metadata")),
            rollup=Rollup.from_dict(_dict(d, "rollup")),
            packages=tuple(Package.from_dict(p) for p in _list(d, "packageStats")),
        )

