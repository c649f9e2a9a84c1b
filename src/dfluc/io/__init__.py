from .loaders import load_csv, save_csv

__all__ = ["load_csv", "save_csv"]
