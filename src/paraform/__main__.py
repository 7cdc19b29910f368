#!/usr/bin/env python3
"""
Command line front end for the paraform shape families.

Usage:
    python -m paraform list
    python -m paraform params PROJECT
    python -m paraform build PROJECT [--param NAME=VALUE ...] [--override ID:FIELD=VALUE ...]
                                     [--delete ID ...] [--unit mm|cm] [--output FILE]

Examples:
    # Show the parameters of the paralette and their ranges
    python -m paraform params paralette

    # Eight fins, no first X-fin, exported as millimetre STL
    python -m paraform build wavy-structure --param finCount=8 \
        --delete xfin-0 --output wavy.stl

    # Triangle lattice infill with a softer frame bevel, as GLB
    python -m paraform build triangle-infill --param fillPattern=2 \
        --override frame:bevel_radius=0.8 --unit cm --output frame.glb
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from paraform.config import load_settings
from paraform.errors import ParaformError
from paraform.geom import vstr
from paraform.logging_config import setup_logging
from paraform.params import UnitType, parse_assignment
from paraform.projects import get_project, list_projects
from paraform.units import UnitSystem, unit_suffix

logger = logging.getLogger(__name__)


def cmd_list(args) -> int:
    for p in list_projects():
        print(f"{p.id:18s} {p.name:18s} {p.description}")
    return 0


def cmd_params(args) -> int:
    project = get_project(args.project)
    for group, defs in project.model.schema.groups().items():
        print(f"[{group or 'General'}]")
        for d in defs:
            suffix = unit_suffix(d.unit, args.unit)
            line = f"  {d.key:20s} {d.default:<8g} [{d.min:g} .. {d.max:g}] {suffix}".rstrip()
            if d.options:
                line += '  ' + ', '.join(f"{o.value}={o.label}" for o in d.options)
            print(line)
    return 0


def _parse_override(text: str):
    """``ID:FIELD=VALUE`` to ``(id, field, value)``"""
    if ':' not in text:
        raise ValueError(f"override must be ID:FIELD=VALUE, got {text!r}")
    part_id, rest = text.split(':', 1)
    field, value = parse_assignment(rest)
    return part_id.strip(), field, value


def cmd_build(args) -> int:
    project = get_project(args.project)
    schema = project.model.schema
    params = {}
    for text in args.param or []:
        key, value = parse_assignment(text)
        if key not in schema:
            print(f"Error: {project.id} has no parameter {key!r}", file=sys.stderr)
            return 2
        params[key] = value

    model = project.create(params)
    for text in args.override or []:
        part_id, field, value = _parse_override(text)
        model.part(part_id)
        model.update_overrides([part_id], **{field: value})
    if args.delete:
        missing = [i for i in args.delete if i not in model.parts]
        if missing:
            print(f"Error: no such part(s): {', '.join(missing)}", file=sys.stderr)
            return 2
        model.delete(args.delete)

    assembly = model.assemble()
    print(f"{project.name}: {len(assembly)} parts")
    for part in model.parts:
        dims = model.base_dimensions(part.id)
        if dims is None:
            print(f"  {part.id:12s} (no geometry)")
            continue
        sx, sy, sz = part.overrides.scale
        size = f"{dims[0] * sx:.3f} x {dims[1] * sy:.3f} x {dims[2] * sz:.3f}"
        print(f"  {part.id:12s} {size} {unit_suffix(UnitType.LENGTH, args.unit)}")
    box = assembly.bbox()
    if box:
        print(f"bounds: {vstr(box[0])} .. {vstr(box[1])}")

    if args.output:
        from paraform.io import export_glb, export_stl

        output = Path(args.output)
        suffix = output.suffix.lower()
        if suffix == '.stl':
            n = export_stl(assembly, output, args.unit, binary=not args.ascii)
            print(f"Exported {n} triangles to: {output}")
        elif suffix in ('.glb', '.gltf'):
            n = export_glb(assembly, output, args.unit)
            print(f"Exported {n} parts to: {output}")
        else:
            print(f"Error: unknown output format: {suffix}", file=sys.stderr)
            return 2
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='python -m paraform',
        description='Parametric shape families for 3D printing',
    )
    parser.add_argument('--log-level', default=None,
                        help='logging level (default: $PARAFORM_LOG_LEVEL or WARNING)')
    parser.add_argument('--log-file', default=None, help='also write the log to FILE')

    subparsers = parser.add_subparsers(dest='action', required=True)

    subparsers.add_parser('list', help='List the shape families')

    params_parser = subparsers.add_parser('params', help='Show the parameters of a family')
    params_parser.add_argument('project', help='Family id')
    params_parser.add_argument('--unit', choices=[u.value for u in UnitSystem], default='mm')

    build_cmd = subparsers.add_parser('build', help='Build a family and optionally export it')
    build_cmd.add_argument('project', help='Family id')
    build_cmd.add_argument('-p', '--param', action='append', metavar='NAME=VALUE',
                           help='Parameter value (can be repeated)')
    build_cmd.add_argument('--override', action='append', metavar='ID:FIELD=VALUE',
                           help='Per-part override, e.g. frame:bevel_radius=0.5')
    build_cmd.add_argument('-d', '--delete', nargs='+', metavar='ID',
                           help='Part ids to leave out')
    build_cmd.add_argument('--unit', choices=[u.value for u in UnitSystem], default='mm',
                           help='Working unit of the model coordinates')
    build_cmd.add_argument('-o', '--output', metavar='FILE',
                           help='Output file (.stl or .glb)')
    build_cmd.add_argument('--ascii', action='store_true', help='Write ASCII STL')
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(args.log_level or load_settings().log_level, args.log_file)

    try:
        if args.action == 'list':
            return cmd_list(args)
        elif args.action == 'params':
            return cmd_params(args)
        elif args.action == 'build':
            return cmd_build(args)
    except (KeyError, ValueError, ParaformError) as exc:
        message = exc.args[0] if isinstance(exc, KeyError) and exc.args else exc
        print(f"Error: {message}", file=sys.stderr)
        return 2
    parser.print_help()
    return 1


if __name__ == '__main__':
    sys.exit(main())
