from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Tuple

import yaml

MODULES_PATH = Path(__file__).parent.parent / "modules"
REQUIRED_FIELDS = ("name", "title", "version", "description", "category")


@dataclass(frozen=True)
class ModuleManifest:
    name: str
    title: str
    description: str
    category: str
    slug: str
    mount: str
    public: bool = True
    api: str | None = None
    flows: Dict[str, List[Any]] = field(default_factory=dict)
    path: Path | None = None


def _mount_from(slug: str, raw: Any) -> str:
    mount = str(raw).strip() if raw else f"/{slug}"
    if not mount.startswith("/"):
        mount = "/" + mount
    if mount != "/" and mount.endswith("/"):
        mount = mount.rstrip("/")
    return mount


def manifest_issues(data: Any) -> List[str]:
    if not isinstance(data, dict):
        return ["module.yaml must be a mapping"]

    issues: List[str] = []
    for name in REQUIRED_FIELDS:
        value = data.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            issues.append(f"missing field: {name}")

    public = data.get("public")
    if public is None or public:
        entrypoints = data.get("entrypoints")
        api = entrypoints.get("api") if isinstance(entrypoints, dict) else None
        if not api:
            issues.append("missing entrypoints.api")
        elif ":" not in str(api):
            issues.append("entrypoints.api must be module:attr")

    mount = data.get("mount")
    if mount is not None:
        mount = str(mount).strip()
        if mount == "/":
            issues.append("mount '/' is reserved")
        if " " in mount or "://" in mount or "\\" in mount:
            issues.append("mount must be a path")
    return issues


def parse_manifest(data: Dict[str, Any], *, path: Path | None = None) -> ModuleManifest:
    issues = manifest_issues(data)
    if issues:
        where = path.name if path is not None else data.get("name", "module")
        raise ValueError(f"{where}: " + "; ".join(issues))

    name = str(data["name"])
    slug = str(data.get("slug") or name.replace("_", "-"))
    public = data.get("public")
    entrypoints = data.get("entrypoints") or {}
    return ModuleManifest(
        name=name,
        title=str(data["title"]),
        description=str(data["description"]),
        category=str(data["category"]),
        slug=slug,
        mount=_mount_from(slug, data.get("mount")),
        public=True if public is None else bool(public),
        api=entrypoints.get("api") if isinstance(entrypoints, dict) else None,
        flows=dict(data.get("flows") or {}),
        path=path,
    )


def load_modules(modules_path: Path = MODULES_PATH) -> Dict[str, ModuleManifest]:
    modules: Dict[str, ModuleManifest] = {}
    if not modules_path.exists():
        return modules

    for module_dir in sorted(modules_path.iterdir()):
        manifest = module_dir / "module.yaml"
        if not module_dir.is_dir() or not manifest.exists():
            continue
        with open(manifest, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        module = parse_manifest(data, path=module_dir)
        if module.name in modules:
            raise ValueError(f"{module_dir.name}: duplicate name '{module.name}'")
        modules[module.name] = module
    return modules


def mount_map(modules: Dict[str, ModuleManifest]) -> List[Tuple[str, ModuleManifest]]:
    seen: Dict[str, str] = {}
    mounts: List[Tuple[str, ModuleManifest]] = []
    for module in modules.values():
        if module.mount in seen:
            raise ValueError(
                f"{module.name}: mount '{module.mount}' duplicates {seen[module.mount]}"
            )
        seen[module.mount] = module.name
        mounts.append((module.mount, module))
    return mounts
