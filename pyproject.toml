[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "cipskit"
version = "0.1.0"
description = "Gray-scale TIFF and BMP image I/O with Lambertian shading, isometric views and a knowledge-file formatter"
requires-python = ">=3.10"
dependencies = []
keywords = [
    "image-processing",
    "tiff",
    "bmp",
    "lambert",
    "shading",
    "isometric",
    "text-formatting",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Image Processing",
    "Topic :: Multimedia :: Graphics :: Graphics Conversion",
    "Topic :: Text Processing :: Filters",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
cipskit-lambert = "cipskit.lambert:main"
cipskit-iso = "cipskit.iso:main"
cipskit-iso2 = "cipskit.iso2:main"
cipskit-kf = "cipskit.report:main"

[tool.hatch.build.targets.wheel]
packages = ["cipskit"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]
