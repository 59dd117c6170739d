from .json_loader import DashboardSnapshot, dump_result_file, load_snapshot_file, to_snapshot

__all__ = ["DashboardSnapshot", "dump_result_file", "load_snapshot_file", "to_snapshot"]
