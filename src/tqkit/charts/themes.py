"""
Palettes and a light chart theme.

The palettes are plain name -> hex mappings so they can be passed to
matplotlib directly (e.g., ``ax.set_prop_cycle(color=list(palette_light().values()))``).
"""

from typing import Dict

from matplotlib.axes import Axes

_LIGHT = {
    'blue': '#2c3e50',
    'red': '#e31a1c',
    'green': '#18BC9C',
    'yellow': '#CCBE93',
    'steel_blue': '#a6cee3',
    'navy_blue': '#1f78b4',
    'light_green': '#b2df8a',
    'pink': '#fb9a99',
    'light_orange': '#fdbf6f',
    'orange': '#ff7f00',
    'light_purple': '#cab2d6',
    'purple': '#6a3d9a',
}

_DARK = {
    'dark_blue': '#1f78b4',
    'dark_green': '#33a02c',
    'dark_red': '#e31a1c',
    'dark_orange': '#ff7f00',
    'dark_purple': '#6a3d9a',
    'brown': '#b15928',
    'light_blue': '#a6cee3',
    'light_green': '#b2df8a',
    'pink': '#fb9a99',
    'light_orange': '#fdbf6f',
    'light_purple': '#cab2d6',
    'light_yellow': '#ffff99',
}

_GREEN = {
    'green_1': '#00441b',
    'green_2': '#006d2c',
    'green_3': '#238b45',
    'green_4': '#41ab5d',
    'green_5': '#74c476',
    'green_6': '#a1d99b',
    'green_7': '#c7e9c0',
    'green_8': '#e5f5e0',
    'grey_1': '#252525',
    'grey_2': '#636363',
    'grey_3': '#969696',
    'grey_4': '#cccccc',
}


def palette_light() -> Dict[str, str]:
    """Light palette: muted primaries followed by their pastel variants."""
    return dict(_LIGHT)


def palette_dark() -> Dict[str, str]:
    """Dark palette: saturated colours first, light companions last."""
    return dict(_DARK)


def palette_green() -> Dict[str, str]:
    """Sequential greens followed by greys."""
    return dict(_GREEN)


def theme_tq(ax: Axes, palette: str = 'light') -> Axes:
    """
    Apply the light theme: white panel, faint grid, no top/right spines and
    the chosen palette as colour cycle for subsequent lines.

    Args:
        ax: Axes to style
        palette: 'light', 'dark' or 'green'

    Returns:
        The axes, for chaining

    Raises:
        ValueError: If the palette is unknown
    """
    palettes = {'light': palette_light, 'dark': palette_dark, 'green': palette_green}
    if palette not in palettes:
        raise ValueError(f"Unknown palette: {palette!r}. Valid options: {', '.join(palettes)}")

    ax.set_facecolor('white')
    ax.grid(True, color='#E5E5E5', linewidth=0.5)
    ax.set_axisbelow(True)
    for side in ('top', 'right'):
        ax.spines[side].set_visible(False)
    for side in ('left', 'bottom'):
        ax.spines[side].set_color('#2c3e50')
    ax.tick_params(colors='#2c3e50', labelsize=9)
    ax.title.set_fontweight('bold')
    ax.set_prop_cycle(color=list(palettes[palette]().values()))

    if ax.get_legend_handles_labels()[0]:
        ax.legend(loc='upper left', frameon=False, fontsize=8)
    return ax
