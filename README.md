# ppgso

Small building blocks for computer graphics exercises.

| Module | What it holds |
| --- | --- |
| `ppgso.image` | `Image`, a grid of `Pixel` values (8-bit `r`, `g`, `b`) stored row by row from the top, and `clamp`, which maps a channel in <0, 1> to a byte. |
| `ppgso.image_bmp` | `load_bmp` and `save_bmp` for uncompressed 24-bit BMP files; `BMPError` for files that cannot be read. |
| `ppgso.image_raw` | `load_raw` and `save_raw` for headerless packed RGB bytes. |
| `ppgso.mtl` | Wavefront material libraries: `Material`, `load_mtl`, `MaterialFileReader`, and the number parsers `try_parse_double` and `parse_float`. |
| `ppgso.obj_loader` | Wavefront OBJ geometry: `load_obj`, `load_obj_stream`, `Shape`, `MeshData`, `VertexIndex`, `fix_index`, `parse_triple`, and `ObjLoadError`. |
| `ppgso.transform` | 4×4 matrices (`translate`, `rotate`, `scale`, `perspective`, `ortho`, `look_at`) and the demo scene transforms (`TransformMode`, `ProjectionMode`, `model_matrix`, `next_transform_mode`, `next_projection_mode`, `projection_matrices`, `cursor_to_viewport`). |
| `ppgso.animate` | `render_frame`, which draws an animated ripple pattern into an `Image`. |

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Images

```python
from ppgso.image import Image, Pixel
from ppgso.image_bmp import load_bmp, save_bmp

image = Image(4, 2)
image.clear(Pixel(0, 0, 255))
image.set_pixel_float(0, 0, 1.0, 0.5, 0.0)   # channels in <0, 1>
image.set_pixel_rgb(1, 0, 10, 20, 30)        # channels in <0, 255>
save_bmp(image, "out.bmp")

again = load_bmp("out.bmp")
assert again.get_pixel(0, 0) == image.get_pixel(0, 0)
```

`get_pixel` returns the stored `Pixel`, so changing it changes the image;
coordinates outside the image raise `IndexError`. `to_bytes` returns the
pixels as packed RGB bytes.

`load_bmp` reads bottom-up and top-down files and raises `BMPError` when the
magic number, bit count (only 24) or compression (only none) is not
supported, or when the image is empty. `save_bmp` always writes a bottom-up
file with rows padded to four bytes.

`load_raw(path, width, height)` reads `width * height` RGB triples; bytes
missing at the end of the file are left black.

## Meshes and materials

```python
from ppgso.obj_loader import load_obj

shapes, materials = load_obj("cube.obj", mtl_basepath="models/")
for shape in shapes:
    print(shape.name, len(shape.mesh.indices) // 3, "triangles")
```

Polygons are split into triangle fans. Within each shape every distinct
position/texture-coordinate/normal combination is stored once in the flat
`positions`, `texcoords` and `normals` lists, and `indices` refers to it.
Each triangle has an entry in `material_ids` (-1 when no material applies).
A new shape starts at every `g`, `o` and `usemtl` line.

`load_obj` raises `ObjLoadError` when the file cannot be opened or a face
refers to a vertex, normal or texture coordinate that does not exist.
`load_obj_stream` parses any iterable of text lines and takes an optional
material reader: a callable that receives the `mtllib` name and returns a
list of materials with a name-to-index map.

`load_mtl` parses an iterable of lines into that same pair. A
`MaterialFileReader` reads the named library relative to its base path; a
missing file gives one default material.

## Transformations

Matrices are `float32` numpy arrays indexed `m[row, column]` and applied to
column vectors.

```python
import math
import numpy as np
from ppgso.transform import perspective, translate, rotate

projection = perspective(math.radians(60.0), 1.0, 0.1, 10.0)
view = translate(np.identity(4), (0.0, 0.0, -3.0))
model = rotate(np.identity(4), 0.5, (0.0, 1.0, 0.0))
mvp = projection @ view @ model
```

`model_matrix(mode, time)` gives the model matrix of one `TransformMode` at a
time in seconds, and `next_transform_mode` steps through the modes, wrapping
around. `projection_matrices(mode)` returns the projection and view matrices
for a `ProjectionMode`. `cursor_to_viewport(x, y, size)` turns window
coordinates in <0, size> into viewport coordinates in <-1, 1> with y pointing
up.

## Animation

```python
from ppgso.image import Image
from ppgso.animate import render_frame

frame = render_frame(Image(512, 512), 1.5)
```

## What this package does not do

It does not open windows, handle keyboard or mouse input, compile shaders or
draw anything on the GPU. It produces images, mesh data and matrices; showing
them on screen is left to whatever rendering library you use.