"""
Artifact decoding: raster images through Pillow, PDF pages through pypdf.
"""

# Standard Library
import dataclasses
import io
import pathlib

# PIP3 modules
import PIL.Image
import pypdf
import pypdf.errors
from loguru import logger

# local repo modules
import gang_sheet_builder as gsb
import gang_sheet_builder.config
import gang_sheet_builder.errors
import gang_sheet_builder.units


Artifact = gsb.units.Artifact
ArtifactDecodeError = gsb.errors.ArtifactDecodeError

RASTER = gsb.units.RASTER
VECTOR = gsb.units.VECTOR
RASTER_SUFFIXES = gsb.config.RASTER_SUFFIXES
VECTOR_SUFFIXES = gsb.config.VECTOR_SUFFIXES
PDF_MAGIC = b"%PDF"


@dataclasses.dataclass
class LoadedArtifact:
	artifact: Artifact
	image: PIL.Image.Image | None = None
	page: pypdf.PageObject | None = None


#============================================
def is_pdf_data(data: bytes, source_name: str = "") -> bool:
	"""
	Decide whether artifact bytes hold a PDF document.

	Args:
		data: Raw artifact bytes.
		source_name: File name, used for the suffix.

	Returns:
		True for PDF data.
	"""
	if data.lstrip()[:4] == PDF_MAGIC:
		return True
	suffix = pathlib.PurePath(source_name).suffix.lower()
	return suffix in VECTOR_SUFFIXES


#============================================
def read_density(image: PIL.Image.Image) -> float | None:
	"""
	Read the horizontal pixel density from image metadata.

	Args:
		image: PIL image.

	Returns:
		Pixels per inch, or None when the image declares none.
	"""
	dpi = image.info.get("dpi")
	if not dpi:
		return None
	try:
		density = float(dpi[0])
	except (TypeError, ValueError, IndexError):
		return None
	if density <= 0:
		return None
	return density


#============================================
def decode_raster(data: bytes, source_name: str = "") -> LoadedArtifact:
	"""
	Decode a raster image.

	Args:
		data: Image bytes.
		source_name: Name for diagnostics.

	Returns:
		LoadedArtifact with the decoded image.
	"""
	try:
		image = PIL.Image.open(io.BytesIO(data))
		image.load()
	except (PIL.UnidentifiedImageError, OSError) as error:
		raise ArtifactDecodeError(source_name, str(error)) from error

	width, height = image.size
	density = read_density(image)
	logger.debug("Decoded raster '{}': {}x{} px, density {}", source_name, width, height, density)
	artifact = Artifact(
		kind=RASTER,
		native_width=width,
		native_height=height,
		density=density,
		source_name=source_name,
	)
	return LoadedArtifact(artifact=artifact, image=image)


#============================================
def decode_vector(data: bytes, source_name: str = "", page_index: int = 0) -> LoadedArtifact:
	"""
	Load one PDF page.

	Page rotation is folded into the content so the media box reports the
	size as displayed.

	Args:
		data: PDF bytes.
		source_name: Name for diagnostics.
		page_index: Zero-based page index.

	Returns:
		LoadedArtifact with the page object.
	"""
	try:
		reader = pypdf.PdfReader(io.BytesIO(data))
		page_count = len(reader.pages)
	except (pypdf.errors.PdfReadError, ValueError, OSError) as error:
		raise ArtifactDecodeError(source_name, str(error)) from error
	if page_index < 0 or page_index >= page_count:
		raise ArtifactDecodeError(
			source_name,
			f"page {page_index} out of range, document has {page_count} pages",
		)

	page = reader.pages[page_index]
	if page.rotation % 360 != 0:
		page.transfer_rotation_to_content()
	width = float(page.mediabox.width)
	height = float(page.mediabox.height)
	logger.debug("Loaded PDF page {} of '{}': {:.2f}x{:.2f} pt", page_index, source_name, width, height)
	artifact = Artifact(
		kind=VECTOR,
		native_width=width,
		native_height=height,
		density=None,
		source_name=source_name,
	)
	return LoadedArtifact(artifact=artifact, page=page)


#============================================
def decode_artifact(data: bytes, source_name: str = "", page_index: int = 0) -> LoadedArtifact:
	"""
	Decode artifact bytes as a PDF page or a raster image.

	Args:
		data: Raw artifact bytes.
		source_name: File name, used for format detection and diagnostics.
		page_index: Page to use when the artifact is a PDF.

	Returns:
		LoadedArtifact.
	"""
	if not data:
		raise ArtifactDecodeError(source_name, "empty input")
	if is_pdf_data(data, source_name):
		return decode_vector(data, source_name, page_index)
	return decode_raster(data, source_name)


#============================================
def load_artifact(path: pathlib.Path, page_index: int = 0) -> LoadedArtifact:
	"""
	Decode an artifact file.

	Args:
		path: Artifact path.
		page_index: Page to use when the artifact is a PDF.

	Returns:
		LoadedArtifact.
	"""
	suffix = path.suffix.lower()
	if suffix and suffix not in RASTER_SUFFIXES and suffix not in VECTOR_SUFFIXES:
		logger.warning("Unrecognized artifact suffix '{}', trying to decode anyway", suffix)
	data = path.read_bytes()
	return decode_artifact(data, path.name, page_index)
