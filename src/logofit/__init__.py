"""Logo and headshot preparation.

Submodules
----------
models
    Bitmap, aspect ratio, geometry and output containers.
fit
    Exact-ratio canvas geometry with minimum dimensions.
compositor
    Padding, centering, scaling, cropping and PNG encoding.
keying
    Color-keyed background removal.
variants
    Logo/headshot variant orchestration.
io_utils
    Decoding, encoding and file helpers.
batch
    File and directory workflows.
"""
