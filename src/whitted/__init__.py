"""Whitted-style recursive ray tracer built on Taichi.

This package renders scenes of spheres, planes and triangles lit by point
lights, with:
- Phong local illumination (ambient, diffuse, specular) and hard shadows
- Recursive mirror reflection
- Dielectric refraction with total internal reflection
- A depth-bounded trace (8 levels) evaluated in parallel per pixel

Subpackages:
    core: Vector and ray utilities, shading, the tracer and the renderer
    geometry: Sphere, plane and triangle intersection routines
    materials: Phong material registry
    scene: Entity storage, point lights, scene manager and demo scene
    camera: Pinhole camera for primary ray generation
    preview: Image export utilities
"""

__version__ = "0.1.0"
