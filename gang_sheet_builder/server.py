"""
HTTP service for gang sheet generation.

POST /merge takes a multipart upload (file, quantity, rotate) and answers
with the gang sheet PDF; POST /plan answers with the layout as JSON.
"""

# Standard Library
import os
import pathlib
import sys
import tempfile

# PIP3 modules
import fastapi
import fastapi.concurrency
import fastapi.middleware.cors
import fastapi.responses
import uvicorn
from loguru import logger

# local repo modules
import gang_sheet_builder as gsb
import gang_sheet_builder.artifact
import gang_sheet_builder.config
import gang_sheet_builder.errors
import gang_sheet_builder.packer
import gang_sheet_builder.render


GangSheetConfig = gsb.config.GangSheetConfig
PlacementRequest = gsb.packer.PlacementRequest
errors = gsb.errors

ENV_PREFIX = "GANG_SHEET_"
DEFAULT_PORT = 8080
DEFAULT_QUANTITY = 1
OUTPUT_FILENAME = "gangsheet.pdf"
APP_FACTORY = "gang_sheet_builder.server:create_app"

ERROR_STATUS = {
	errors.InvalidArtifact: 400,
	errors.ArtifactDecodeError: 400,
	errors.InvalidSheetSpec: 400,
	errors.InvalidRequest: 400,
	errors.ArtifactTooLarge: 422,
	errors.QuantityExceedsLimit: 422,
}


#============================================
def configure_logging() -> None:
	"""
	Route loguru output to stderr at the LOG_LEVEL level.
	"""
	log_level = os.getenv("LOG_LEVEL", "info").upper()
	logger.remove()
	logger.add(sys.stderr, level=log_level)


#============================================
def _env_value(name: str, default, parse):
	value = os.getenv(ENV_PREFIX + name)
	if value is None or not value.strip():
		return default
	try:
		return parse(value.strip())
	except ValueError as error:
		raise errors.InvalidConfig(ENV_PREFIX + name, value, str(error)) from error


#============================================
def config_from_env() -> GangSheetConfig:
	"""
	Build the service configuration from GANG_SHEET_* environment variables.

	Returns:
		GangSheetConfig.
	"""
	return GangSheetConfig(
		default_density=_env_value("DEFAULT_DENSITY", gsb.config.DEFAULT_DENSITY, float),
		sheet_width=_env_value("SHEET_WIDTH", gsb.config.DEFAULT_SHEET_WIDTH, float),
		sheet_height=_env_value("SHEET_HEIGHT", gsb.config.DEFAULT_SHEET_HEIGHT, float),
		margin=_env_value("MARGIN", gsb.config.DEFAULT_MARGIN, float),
		gap=_env_value("GAP", gsb.config.DEFAULT_GAP, float),
		max_sheets=_env_value("MAX_SHEETS", gsb.config.DEFAULT_MAX_SHEETS, int),
		draw_outlines=os.getenv(ENV_PREFIX + "DRAW_OUTLINES", "false").lower() == "true",
	)


#============================================
def parse_quantity(value: str | None) -> int:
	"""
	Parse the quantity form field.

	Missing or unparsable values fall back to a single copy; an explicit
	number, including zero or a negative one, is passed on as given.

	Args:
		value: Raw form value.

	Returns:
		Quantity.
	"""
	if value is None:
		return DEFAULT_QUANTITY
	try:
		return int(value.strip())
	except ValueError:
		return DEFAULT_QUANTITY


#============================================
def parse_rotate(value: str | None) -> bool:
	"""
	Parse the rotate form field; only "true" enables rotation.
	"""
	return value is not None and value.strip().lower() == "true"


#============================================
def to_http_error(error: errors.GangSheetError) -> fastapi.HTTPException:
	"""
	Map a planning failure to an HTTP error.

	Args:
		error: Planning failure.

	Returns:
		HTTPException with a 4xx status.
	"""
	status_code = ERROR_STATUS.get(type(error), 400)
	return fastapi.HTTPException(status_code=status_code, detail=str(error))


#============================================
def plan_upload(
	data: bytes,
	filename: str,
	request: PlacementRequest,
	config: GangSheetConfig,
	render: bool,
) -> tuple[gsb.packer.PlacementPlan, bytes | None]:
	"""
	Stage an upload in a temporary directory, plan it and optionally render.

	The temporary directory is removed on success and on failure.

	Args:
		data: Uploaded bytes.
		filename: Uploaded file name.
		request: Quantity and rotation.
		config: Service configuration.
		render: Produce PDF bytes as well as the plan.

	Returns:
		Tuple of (plan, pdf_bytes or None).
	"""
	safe_name = pathlib.PurePath(filename or "upload").name or "upload"
	with tempfile.TemporaryDirectory(prefix="gangsheet_") as work_dir:
		upload_path = pathlib.Path(work_dir) / safe_name
		upload_path.write_bytes(data)
		loaded = gsb.artifact.load_artifact(upload_path)
		plan = gsb.packer.build_plan(loaded.artifact, request, config)
		pdf_bytes = None
		if render:
			pdf_bytes = gsb.render.render_plan_bytes(plan, loaded, config.draw_outlines)
	return (plan, pdf_bytes)


#============================================
def create_app(config: GangSheetConfig | None = None) -> fastapi.FastAPI:
	"""
	Build the FastAPI application.

	Args:
		config: Service configuration, defaults to the environment.

	Returns:
		FastAPI app.
	"""
	if config is None:
		config = config_from_env()

	app = fastapi.FastAPI(
		title="Gang Sheet Builder",
		description="Upload one image or PDF page and receive it tiled across gang sheet pages.",
	)
	app.add_middleware(
		fastapi.middleware.cors.CORSMiddleware,
		allow_origins=["*"],
		allow_methods=["*"],
		allow_headers=["*"],
	)
	app.state.config = config

	async def _handle(
		file: fastapi.UploadFile,
		quantity: str | None,
		rotate: str | None,
		render: bool,
	) -> tuple[gsb.packer.PlacementPlan, bytes | None]:
		request = PlacementRequest(quantity=parse_quantity(quantity), rotate=parse_rotate(rotate))
		data = await file.read()
		try:
			return await fastapi.concurrency.run_in_threadpool(
				plan_upload,
				data,
				file.filename or "",
				request,
				app.state.config,
				render,
			)
		except errors.GangSheetError as error:
			logger.warning("Rejected '{}': {}", file.filename, error)
			raise to_http_error(error) from error

	@app.get("/")
	async def root() -> dict:
		return {"message": "Gang sheet service is running", "docs": "/docs"}

	@app.post("/merge")
	async def merge(
		file: fastapi.UploadFile = fastapi.File(...),
		quantity: str | None = fastapi.Form(None),
		rotate: str | None = fastapi.Form(None),
	) -> fastapi.responses.Response:
		plan, pdf_bytes = await _handle(file, quantity, rotate, render=True)
		logger.info(
			"Merged '{}': {} copies on {} sheets",
			file.filename,
			plan.total_placements,
			len(plan.sheets),
		)
		return fastapi.responses.Response(
			content=pdf_bytes,
			media_type="application/pdf",
			headers={"Content-Disposition": f'attachment; filename="{OUTPUT_FILENAME}"'},
		)

	@app.post("/plan")
	async def plan_layout(
		file: fastapi.UploadFile = fastapi.File(...),
		quantity: str | None = fastapi.Form(None),
		rotate: str | None = fastapi.Form(None),
	) -> dict:
		plan, _pdf_bytes = await _handle(file, quantity, rotate, render=False)
		return gsb.packer.plan_to_dict(plan)

	return app


#============================================
def main() -> None:
	"""
	Serve the app with uvicorn on PORT.
	"""
	configure_logging()
	port = int(os.getenv("PORT", str(DEFAULT_PORT)))
	logger.info("Gang sheet service listening on port {}", port)
	uvicorn.run(APP_FACTORY, factory=True, host="0.0.0.0", port=port)
