from __future__ import annotations

import argparse
import ast
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Sequence

PACKAGE_ROOT = Path(__file__).resolve().parents[1] / "src" / "qrmenu"

# adapter libraries are reachable from infrastructure and api only
_ADAPTER_MODULES = frozenset(
    {
        "fastapi",
        "starlette",
        "sqlalchemy",
        "alembic",
        "redis",
        "argon2",
        "supabase",
        "segno",
        "httpx",
        "requests",
        "opentelemetry",
        "qrmenu.api",
        "qrmenu.infrastructure",
    }
)

LAYER_POLICIES: dict[str, frozenset[str]] = {
    "domain": _ADAPTER_MODULES
    | {"pydantic", "prometheus_client", "qrmenu.application"},
    "application": _ADAPTER_MODULES,
}


@dataclass(frozen=True)
class Violation:
    file_path: Path
    line: int
    module: str
    layer: str


def _python_files(root: Path) -> Iterable[Path]:
    if root.is_file() and root.suffix == ".py":
        yield root
        return
    if root.is_dir():
        yield from sorted(root.rglob("*.py"))


def _matches_forbidden(module: str, forbidden_modules: frozenset[str]) -> bool:
    return any(
        module == forbidden or module.startswith(f"{forbidden}.")
        for forbidden in forbidden_modules
    )


def _imported_modules(tree: ast.AST) -> Iterable[tuple[int, str]]:
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                yield node.lineno, alias.name
        elif isinstance(node, ast.ImportFrom) and node.module and node.level == 0:
            yield node.lineno, node.module


def _scan_file(file_path: Path, layer: str) -> list[Violation]:
    tree = ast.parse(file_path.read_text(encoding="utf-8"), filename=str(file_path))
    forbidden_modules = LAYER_POLICIES[layer]
    return [
        Violation(file_path=file_path, line=line, module=module, layer=layer)
        for line, module in _imported_modules(tree)
        if _matches_forbidden(module, forbidden_modules)
    ]


def find_violations(paths: Sequence[Path], layer: str = "domain") -> list[Violation]:
    violations: list[Violation] = []
    for path in paths:
        for file_path in _python_files(path):
            violations.extend(_scan_file(file_path, layer))
    return violations


def check_package(package_root: Path = PACKAGE_ROOT) -> list[Violation]:
    violations: list[Violation] = []
    for layer in LAYER_POLICIES:
        violations.extend(find_violations([package_root / layer], layer))
    return violations


def _parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Import policy check for the qrmenu domain and application layers."
    )
    parser.add_argument(
        "--path",
        action="append",
        default=[],
        help="Path to scan (repeatable). Defaults to every layer under src/qrmenu.",
    )
    parser.add_argument(
        "--layer",
        choices=sorted(LAYER_POLICIES),
        default="domain",
        help="Policy applied to --path targets.",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = _parse_args(argv)
    if args.path:
        violations = find_violations([Path(item) for item in args.path], args.layer)
    else:
        violations = check_package()

    if not violations:
        print("depcheck passed")
        return 0

    print("depcheck failed: forbidden imports detected")
    for violation in violations:
        print(f"{violation.file_path}:{violation.line} [{violation.layer}] -> {violation.module}")
    return 1


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
