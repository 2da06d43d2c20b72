from __future__ import annotations

from typing import Dict, List

from universe.registry import ModuleManifest, load_modules


def _normalize_key(value: str) -> str:
    return "".join(char for char in value.lower() if char.isalnum())


def resolve_flow_links(
    module_name: str,
    *,
    when: str = "after_success",
    base_url: str | None = None,
    modules: Dict[str, ModuleManifest] | None = None,
) -> List[Dict[str, str]]:
    if modules is None:
        modules = load_modules()
    name_map = {_normalize_key(name): name for name in modules}
    module_key = name_map.get(_normalize_key(module_name))
    if not module_key:
        return []

    links: List[Dict[str, str]] = []
    for entry in modules[module_key].flows.get(when) or []:
        if isinstance(entry, dict):
            target = entry.get("target") or entry.get("module")
            label = entry.get("label")
        else:
            target, label = entry, None

        target_key = name_map.get(_normalize_key(str(target or "")))
        if not target_key:
            continue

        target_meta = modules[target_key]
        href = target_meta.mount
        if base_url:
            href = base_url.rstrip("/") + href
        links.append({"label": str(label or target_meta.title), "href": href})

    return links
