"""
getopts help rendering.

compose(registry) builds a rich renderable:

    usage: tool [options] [--] [arguments ...]

    copies files around

     -v, +v, --verbose    increase verbosity
     -o, --output <value> write to file

Palette keys
- usage-label, program-name, usage-section, description-section
- flag-name, option-name, metavar, argument-description
- panel-title

Customization
- Define a mapping named __styles__ in __main__ to override any palette entry.
- When the registry is not colorful, styling is suppressed.
- When the registry is fancy, the whole screen is wrapped in a Panel.
"""
from collections import defaultdict

from rich.console import Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text


def compose(registry, /):
    """
    Build the help renderable for every flag and option declared in registry,
    in declaration order (flags first).
    """
    styles = defaultdict(str, {
        # === Head sections ===
        "usage-label": "bold #00E6FF",  # CYAN → signature info color
        "program-name": "bold #FF4D94",  # MAGENTA-PINK → brand pop
        "usage-section": "bold #36C5F0",  # SKY-BLUE → softer than cyan
        "description-section": "italic #A3A3A3",  # Neutral gray

        # === Names / metavars ===
        "flag-name": "bold #22C55E",  # GREEN for flags
        "option-name": "bold #00E6FF",  # CYAN for options
        "metavar": "bold #FFD600",  # AMBER for values
        "argument-description": "#9CA3AF",  # Muted gray

        # === Fancy panel ===
        "panel-title": "bold #FF4D94",
    } | getattr(__import__("__main__"), "__styles__", {}))

    def styler(style):
        return styles[style] if registry.colorful else ""

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        if not registry.colorful:
            return Text(str(fragment))
        if isinstance(fragment, Text):
            return fragment
        return Text(str(fragment), style)

    # Flags list their negated spelling right after the short one.
    def names(argument):
        style = styler("option-name" if argument.takes_argument else "flag-name")
        spellings = []
        if argument.short is not None:
            spellings.append("-" + argument.short)
            if not argument.takes_argument:
                spellings.append("+" + argument.short)
        if argument.long is not None:
            spellings.append("--" + argument.long)
        label = Text(", ").join(text(spelling, style) for spelling in spellings)
        if argument.takes_argument:
            label.append(" ").append(text("<value>", styler("metavar")))
        return label

    renders = []

    usage = Text()
    usage.append("usage", styler("usage-label")).append(":")
    usage.append(" ")
    usage.append(text(registry.prog, styler("program-name")))
    usage.append(" ")
    usage.append(text("[options] [--] [arguments ...]", styler("usage-section")))
    renders.append(usage)

    if registry.descr:
        renders.append(Text(""))
        renders.append(text(registry.descr, styler("description-section")))

    if arguments := registry.flags + registry.options:
        table = Table.grid(padding=(0, 2))
        table.add_column(no_wrap=True)
        table.add_column()
        for argument in arguments:
            table.add_row(names(argument), text(argument.help, styler("argument-description")))
        renders.append(Text(""))
        renders.append(table)

    if registry.fancy:
        return Panel(Group(*renders), title=text(registry.prog, styler("panel-title")), title_align="left")

    return Group(*renders)


__all__ = (
    "compose",
)
