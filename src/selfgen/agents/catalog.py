"""Static catalog of pre-built visual primitives."""

from collections.abc import Iterable

from ..core.logging_config import get_logger
from .models import AcquireResult

logger = get_logger(__name__)

SHADCN_PRIMITIVES: tuple[str, ...] = (
    "Accordion", "Alert", "AlertDialog", "AspectRatio", "Avatar", "Badge", "Breadcrumb", "Button",
    "Calendar", "Card", "Carousel", "Chart", "Checkbox", "Collapsible", "Combobox", "Command",
    "ContextMenu", "DataTable", "DatePicker", "Dialog", "Drawer", "DropdownMenu", "HoverCard",
    "Input", "InputOtp", "Label", "Menubar", "NavigationMenu", "Pagination", "Popover", "Progress",
    "RadioGroup", "Resizable", "ScrollArea", "Select", "Separator", "Sheet", "Sidebar", "Skeleton",
    "Slider", "Sonner", "Switch", "Table", "Tabs", "Textarea", "Toast", "Toggle", "ToggleGroup",
    "Tooltip",
)


def normalize_name(name: str) -> str:
    """AlertDialog -> alert-dialog."""
    stripped = name.strip()
    out: list[str] = []
    for i, ch in enumerate(stripped):
        if ch.isupper() and i > 0 and stripped[i - 1].islower():
            out.append("-")
        out.append(ch.lower())
    return "".join(out).replace("_", "-").replace(" ", "-")


class StaticCatalog:
    """
    Catalog with a fixed registry of primitives.

    ``installed`` primitives are available right away; other registry
    entries become available once acquired. Names outside the registry can
    never be acquired.
    """

    def __init__(
        self,
        registry: Iterable[str] = SHADCN_PRIMITIVES,
        installed: Iterable[str] | None = None,
    ) -> None:
        self._registry = {normalize_name(n) for n in registry}
        base = self._registry if installed is None else installed
        self._installed = {normalize_name(n) for n in base}

    def is_available(self, name: str) -> bool:
        return normalize_name(name) in self._installed

    def available_kinds(self) -> list[str]:
        return sorted(self._installed)

    async def acquire(self, names: list[str]) -> list[AcquireResult]:
        results = []
        for name in names:
            normalized = normalize_name(name)
            if normalized in self._registry:
                self._installed.add(normalized)
                results.append(AcquireResult(name=name, success=True))
            else:
                results.append(AcquireResult(
                    name=name,
                    success=False,
                    error=f"Component '{normalized}' not available in registry",
                ))
        failed = [r.name for r in results if not r.success]
        logger.info("primitives_acquired", requested=len(names), failed=failed)
        return results
