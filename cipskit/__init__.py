"""Gray-scale TIFF/BMP image I/O, Lambertian shading, isometric views and a knowledge-file formatter."""

__version__ = "0.1.0"