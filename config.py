"""Central configuration for digit normalization.

All tunable parameters are defined here with descriptive names.
The defaults reproduce the canonical 28x28 MNIST-style representation the
downstream classifier was trained on; changing them changes the statistical
shape of every vector the pipeline emits.
"""

# =============================================================================
# INPUT
# =============================================================================

# Bytes per pixel in the RGBA8 input buffer
RGBA_CHANNELS = 4

# Size of the drawing pad that uploaded images are stretched onto (width, height)
PAD_SIZE = (280, 280)

# ITU-R BT.601 luminance weights for R, G, B (alpha is ignored)
LUMA_WEIGHTS = (0.299, 0.587, 0.114)

# =============================================================================
# THRESHOLDING
# =============================================================================

# Number of intensity levels in the Otsu histogram
HISTOGRAM_BINS = 256

# Mean intensity above which the image is treated as dark ink on a light
# background (the mask is inverted). Strictly greater-than.
POLARITY_MEAN_THRESHOLD = 0.5

# =============================================================================
# CANVAS
# =============================================================================

# Side of the square output canvas
CANVAS_SIZE = 28

# Longest side of the digit after resampling (leaves a 4px margin on a 28 canvas)
TARGET_SIZE = 20

# Recenter the digit on its intensity centroid
DEFAULT_CENTER = True

# =============================================================================
# BLUR AND NORMALIZATION
# =============================================================================

# Apply the optional separable Gaussian blur
DEFAULT_BLUR = False

# Gaussian sigma in pixels
BLUR_SIGMA = 0.8

# Kernel radius is max(1, round(BLUR_RADIUS_FACTOR * sigma))
BLUR_RADIUS_FACTOR = 2.5

# Floor on the min-max range, keeps flat images at zero instead of NaN
NORMALIZE_EPSILON = 1e-6

# =============================================================================
# CLI ARTIFACTS
# =============================================================================

# Nearest-neighbor enlargement factor for saved 28x28 artifacts (112px previews)
ARTIFACT_UPSCALE = 4
