"""CLI wrapper for inverting one scene and exporting it as NetCDF."""

import argparse

from sstmaps.pipeline.sst import invert_scene

if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("scene", type=str)
    parser.add_argument("--retrieve-land", action="store_true")
    parser.add_argument("--out", type=str, default="sst.nc")
    args = parser.parse_args()

    result = invert_scene(args.scene, retrieve_land=args.retrieve_land)
    result.to_xarray().to_netcdf(args.out)
    print(
        f"{result.name} {result.acquired:%Y-%m-%d %H:%M:%S} "
        f"{result.report.removed} pixels clipped -> {args.out}"
    )
