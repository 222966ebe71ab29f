"""
Built-in package catalog and JDK choices.

Categories are structured records (label, kind, entries) so menus and
the package set builder never have to split encoded strings.
"""

from __future__ import annotations

from brewstrap.core.models.intent import CatalogEntry, Category, PackageKind

# Catalog name that triggers the JDK version sub-flow instead of a
# literal install.
JAVA_PLACEHOLDER = "java"


def _entries(*pairs: tuple[str, str]) -> tuple[CatalogEntry, ...]:
    return tuple(CatalogEntry(name=n, description=d) for n, d in pairs)


CATALOG: tuple[Category, ...] = (
    Category(
        label="Developer tools (command line)",
        kind=PackageKind.FORMULA,
        color="cyan",
        entries=_entries(
            ("git", "Distributed version control"),
            ("node", "Node.js runtime"),
            (JAVA_PLACEHOLDER, "Java Development Kit (choose a version)"),
            ("flutter", "Flutter SDK"),
            ("fvm", "Flutter Version Management"),
            ("gradle", "Gradle build tool"),
        ),
    ),
    Category(
        label="Developer applications",
        kind=PackageKind.CASK,
        color="blue",
        entries=_entries(
            ("visual-studio-code", "Visual Studio Code"),
            ("android-studio", "Android Studio"),
            ("docker", "Docker Desktop"),
            ("sublime-text", "Sublime Text"),
            ("jetbrains-toolbox", "JetBrains Toolbox"),
        ),
    ),
    Category(
        label="Browsers",
        kind=PackageKind.CASK,
        color="magenta",
        entries=_entries(
            ("google-chrome", "Google Chrome"),
            ("firefox", "Mozilla Firefox"),
            ("microsoft-edge-dev", "Microsoft Edge (Dev channel)"),
            ("arc", "Arc browser"),
        ),
    ),
    Category(
        label="Communication",
        kind=PackageKind.CASK,
        color="cyan",
        entries=_entries(
            ("wechat", "WeChat"),
            ("qq", "QQ"),
            ("telegram-desktop", "Telegram"),
            ("discord", "Discord"),
            ("slack", "Slack"),
        ),
    ),
    Category(
        label="Office & design",
        kind=PackageKind.CASK,
        color="blue",
        entries=_entries(
            ("wps-office", "WPS Office"),
            ("figma", "Figma"),
            ("obsidian", "Obsidian"),
        ),
    ),
    Category(
        label="System utilities",
        kind=PackageKind.CASK,
        color="magenta",
        entries=_entries(
            ("iterm2", "iTerm2 terminal"),
            ("rectangle", "Window management"),
            ("stats", "Menu bar system monitor"),
            ("the-unarchiver", "Archive extractor"),
            ("raycast", "Launcher"),
        ),
    ),
)

# (menu label, Homebrew formula)
JDK_CHOICES: tuple[tuple[str, str], ...] = (
    ("OpenJDK 11 (LTS)", "openjdk@11"),
    ("OpenJDK 17 (LTS, recommended)", "openjdk@17"),
    ("OpenJDK 21 (LTS)", "openjdk@21"),
    ("OpenJDK (latest stable)", "openjdk"),
)
