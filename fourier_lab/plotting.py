"""Matplotlib figure of a function against its truncated series."""

import matplotlib.pyplot as plt
import numpy as np

# avoid the unicode minus glyph missing from some fonts
plt.rcParams['axes.unicode_minus'] = False


def comparison_figure(result, baseline_terms=(1,), figsize=(10, 5)):
    """Plot the original curve and the approximation held by ``result``.

    ``baseline_terms`` adds dotted reference curves for smaller N, skipped
    when they are not below the current term count.
    """
    term_count = len(result.coefficients)
    fig, ax = plt.subplots(figsize=figsize)

    # 1. original (black)
    ax.plot(result.original.xs, result.original.ys, 'k-', linewidth=2, alpha=0.4, label='Original')

    # 2. reference N (green dotted)
    for n in baseline_terms:
        if n < term_count:
            baseline = result.with_terms(n)
            ax.plot(baseline.approximation.xs, baseline.approximation.ys, 'g:', alpha=0.6, linewidth=1, label=f'N={n}')

    # 3. current N (blue)
    ax.plot(result.approximation.xs, result.approximation.ys, 'b-', linewidth=2.5, alpha=0.9, label=f'N={term_count}')

    interval = result.coefficients.interval
    ax.set_xlim(interval.lower, interval.upper)
    ys = result.approximation.ys
    if len(ys) and np.isfinite(ys).any():
        ax.set_ylim(np.nanmin(ys) * 1.2 - 1, np.nanmax(ys) * 1.2 + 1)

    ax.set_title(f"Fourier Series Approximation: {result.function} (N={term_count})")
    ax.set_xlabel("x")
    ax.set_ylabel("f(x)")
    ax.axhline(0, color='black', linewidth=0.8)
    ax.legend(loc='upper right')
    ax.grid(True, linestyle='--', alpha=0.5)
    fig.tight_layout()
    return fig
