"""Registry of the shape families."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Type

from paraform.projects.base import Assembly, AssemblyPart, ProjectModel
from paraform.projects.paralette import Paralette
from paraform.projects.triangle_infill import TriangleInfill
from paraform.projects.wavy import WavyStructure


@dataclass(frozen=True)
class Project:
    id: str
    name: str
    description: str
    model: Type[ProjectModel]
    part_label: str = 'Part'

    def create(self, params=None, **kwargs) -> ProjectModel:
        return self.model(params, **kwargs)


PROJECTS: Dict[str, Project] = {p.id: p for p in [
    Project('wavy-structure', 'Wavy Structure',
            'Parametric wavy fin lattice with dual-cosine wave profile',
            WavyStructure, 'Fin'),
    Project('paralette', 'Paralette',
            'A-shaped triangular fitness frame with grip tube',
            Paralette),
    Project('triangle-infill', 'Triangle Infill',
            'Triangle with selectable 3D-print infill patterns',
            TriangleInfill),
]}


def get_project(project_id: str) -> Project:
    try:
        return PROJECTS[project_id]
    except KeyError:
        raise KeyError(f'unknown project {project_id!r}; '
                       f'choose from {", ".join(PROJECTS)}') from None


def list_projects() -> List[Project]:
    return list(PROJECTS.values())


__all__ = ['Project', 'PROJECTS', 'get_project', 'list_projects',
           'ProjectModel', 'Assembly', 'AssemblyPart']
