"""
Unit normalization: native artifact size to a physical footprint in inches.
"""

# Standard Library
import dataclasses
import math

# PIP3 modules
from loguru import logger

# local repo modules
import gang_sheet_builder as gsb
import gang_sheet_builder.config
import gang_sheet_builder.errors


DEFAULT_DENSITY = gsb.config.DEFAULT_DENSITY
points_to_inches = gsb.config.points_to_inches
InvalidArtifact = gsb.errors.InvalidArtifact

RASTER = "raster"
VECTOR = "vector"
ARTIFACT_KINDS = {RASTER, VECTOR}


@dataclasses.dataclass(frozen=True)
class Artifact:
	kind: str
	native_width: float
	native_height: float
	density: float | None = None
	source_name: str = ""


@dataclasses.dataclass(frozen=True)
class Footprint:
	width: float
	height: float


#============================================
def resolve_density(density: float | None, default_density: float = DEFAULT_DENSITY) -> float:
	"""
	Pick the density used to convert raster pixels to inches.

	Args:
		density: Declared pixels per inch, may be None.
		default_density: Fallback pixels per inch.

	Returns:
		Positive pixels per inch.
	"""
	gsb.config.validate_default_density(default_density)
	if density is None or not math.isfinite(density) or density <= 0:
		return float(default_density)
	return float(density)


#============================================
def normalize(
	artifact: Artifact,
	rotate: bool,
	default_density: float = DEFAULT_DENSITY,
) -> Footprint:
	"""
	Convert an artifact to its on-sheet footprint in inches.

	Raster sizes are divided by density; vector pages are declared in points
	and converted at 72 points per inch. Rotation swaps the converted width
	and height, so it always applies to the physical footprint and never to
	pixel dimensions.

	Args:
		artifact: Decoded artifact.
		rotate: Rotate each placement 90 degrees.
		default_density: Density used when the artifact declares none.

	Returns:
		Footprint after rotation.
	"""
	if not (math.isfinite(artifact.native_width) and math.isfinite(artifact.native_height)):
		raise InvalidArtifact(
			artifact.native_width,
			artifact.native_height,
			artifact.source_name,
			reason="dimensions must be finite",
		)
	if artifact.native_width <= 0 or artifact.native_height <= 0:
		raise InvalidArtifact(artifact.native_width, artifact.native_height, artifact.source_name)
	if artifact.kind not in ARTIFACT_KINDS:
		raise InvalidArtifact(
			artifact.native_width,
			artifact.native_height,
			artifact.source_name,
			reason=f"unknown kind {artifact.kind!r}, expected one of {sorted(ARTIFACT_KINDS)}",
		)

	if artifact.kind == VECTOR:
		width = points_to_inches(artifact.native_width)
		height = points_to_inches(artifact.native_height)
	else:
		density = resolve_density(artifact.density, default_density)
		if density != artifact.density:
			logger.warning(
				"No usable density for '{}' ({}), assuming {} ppi",
				artifact.source_name,
				artifact.density,
				density,
			)
		width = artifact.native_width / density
		height = artifact.native_height / density

	if rotate:
		width, height = height, width
	return Footprint(width=width, height=height)
