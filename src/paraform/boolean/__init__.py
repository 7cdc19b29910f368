"""Boolean engine registry.

Engines are modules exposing ``solid_boolean(a, b, operation, *,
backend=None)``.  ``paraform.geom3d.solid_boolean`` picks one by name from
the ``engine:backend`` string configured in ``PARAFORM_BOOLEAN_ENGINE``.
"""

from . import trimesh_engine as trimesh

ENGINE_REGISTRY = {'trimesh': trimesh}


def get_engine(name: str):
    engine = ENGINE_REGISTRY.get(name)
    if engine is None:
        raise ValueError(f'unknown boolean engine {name!r}')
    return engine


__all__ = ['ENGINE_REGISTRY', 'get_engine', 'trimesh']
