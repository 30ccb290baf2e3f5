import matplotlib.pyplot as plt

from fourier_lab import calculate
from fourier_lab.plotting import comparison_figure


def test_comparison_figure_draws_all_curves():
    result = calculate("square(x)", 10)
    fig = comparison_figure(result)
    try:
        ax = fig.axes[0]
        labels = [text.get_text() for text in ax.get_legend().get_texts()]
        assert labels == ["Original", "N=1", "N=10"]
        assert ax.get_xlim() == (result.coefficients.interval.lower, result.coefficients.interval.upper)
    finally:
        plt.close(fig)


def test_comparison_figure_skips_baseline_for_one_term():
    result = calculate("sin(x)", 1)
    fig = comparison_figure(result)
    try:
        labels = [text.get_text() for text in fig.axes[0].get_legend().get_texts()]
        assert labels == ["Original", "N=1"]
    finally:
        plt.close(fig)
