from .sst import SSTResult, invert_arrays, invert_scene, process_scenes, save_result

__all__ = [
    "SSTResult",
    "invert_arrays",
    "invert_scene",
    "process_scenes",
    "save_result",
]
