#!/usr/bin/env python3
"""
SurfLab - Krümmungsanalyse für Dreiecksnetze und Bézier-Flächen
Einstiegspunkt

Usage:
    python main.py bunny.obj --fair --save-mesh bunny_faired.ply
    python main.py patch.bzr --elevate-u 2 --resolution 30 --save-bezier patch_e.bzr
    python main.py patch.bzr --basis trigonometric --trigo-table trigo.txt
"""

import argparse
import sys
from pathlib import Path

from loguru import logger

from config.defaults import Defaults
from config.feature_flags import set_flag
from config.version import get_version_info
from core.geometry_model import GeometryModel
from modeling.bezier_surface import BasisType
from modeling.errors import SurfLabError
from analysis.fairing import LoggingProgressReporter

BEZIER_SUFFIXES = {".bzr", ".bez"}


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Normalen und mittlere Krümmung von Meshes und Bézier-Flächen"
    )
    parser.add_argument("model", type=Path, help="Mesh-Datei (OBJ, STL, PLY, ...) oder Bézier-Datei (.bzr)")
    parser.add_argument(
        "--basis",
        choices=[b.value for b in BasisType],
        default=BasisType.BERNSTEIN.value,
        help="Basis für Bézier-Flächen (trigonometrisch nur bei ungeraden Graden)"
    )
    parser.add_argument("--trigo-table", type=Path, help="Koeffiziententabelle der trigonometrischen Basis")
    parser.add_argument(
        "--resolution", "-r",
        type=int,
        default=Defaults.TESSELLATION_RESOLUTION,
        help="Tessellierungsauflösung pro Richtung"
    )
    parser.add_argument(
        "--cutoff",
        type=float,
        default=Defaults.CUTOFF_RATIO,
        help="Anteil, der an beiden Enden der Krümmungsverteilung abgeschnitten wird"
    )
    parser.add_argument("--elevate-u", type=int, default=0, metavar="N", help="Grad in u N-mal erhöhen")
    parser.add_argument("--elevate-v", type=int, default=0, metavar="N", help="Grad in v N-mal erhöhen")
    parser.add_argument("--fair", action="store_true", help="Mesh glätten (nur Mesh-Modus)")
    parser.add_argument(
        "--better-mean-curvature",
        action="store_true",
        help="Rusinkiewicz-Schätzer statt Dihedralwinkel für Meshes"
    )
    parser.add_argument("--save-bezier", type=Path, help="Kontrollnetz speichern")
    parser.add_argument("--save-mesh", type=Path, help="Mesh inkl. Normalen und Krümmung speichern")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug-Ausgaben")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)

    logger.remove()
    logger.add(
        sys.stderr,
        format="<level>{level: <8}</level> | {message}",
        level="DEBUG" if args.verbose else "INFO",
    )
    info = get_version_info()
    logger.info(f"{info['app_name']} {info['version_full']}")

    if args.better_mean_curvature:
        set_flag("better_mean_curvature", True)

    model = GeometryModel(resolution=args.resolution, cutoff_ratio=args.cutoff)
    try:
        if args.trigo_table:
            model.load_trigonometric_table(args.trigo_table)
        model.set_basis(BasisType(args.basis))

        if args.model.suffix.lower() in BEZIER_SUFFIXES:
            model.open_bezier(args.model)
            for _ in range(args.elevate_u):
                model.elevate_u()
            for _ in range(args.elevate_v):
                model.elevate_v()
        else:
            model.open_mesh(args.model)
            if args.fair:
                model.fair_mesh(LoggingProgressReporter())

        mean_min, mean_max = model.mean_range
        logger.info(f"Vertices: {model.mesh.n_vertices}, Faces: {model.mesh.n_faces}")
        logger.info(f"Mittlere Krümmung (Farbbereich): [{mean_min:.6g}, {mean_max:.6g}]")

        if args.save_bezier and not model.save_bezier(args.save_bezier):
            logger.error(f"Bézier-Datei konnte nicht gespeichert werden: {args.save_bezier}")
            return 1
        if args.save_mesh:
            model.save_mesh(args.save_mesh)
    except SurfLabError as e:
        logger.error(str(e))
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
