"""RGB images with BMP and RAW files, Wavefront OBJ/MTL loading, transformation matrices and an animated pattern."""

__version__ = "0.1.0"

__all__ = ["animate", "image", "image_bmp", "image_raw", "mtl", "obj_loader", "transform"]