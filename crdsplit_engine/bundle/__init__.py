from .loader import load_chart
from .writer import save_chart_dir

__all__ = ["load_chart", "save_chart_dir"]
