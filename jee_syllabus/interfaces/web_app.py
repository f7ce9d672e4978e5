"""
Web App - Admin syllabus import API.

Exposes the same loading, validation and upsert logic as the command line
seeder over HTTP, for the admin console:

    GET  /health
    GET  /admin/syllabus-import/files      syllabus JSON files in the seeds dir
    GET  /admin/syllabus-import/preview    validate + preview one file
    POST /admin/syllabus-import/import     seed one file into the database
    POST /admin/syllabus-import/validate   validate posted syllabus data
    GET  /admin/syllabus-import/stats      row counts under a stream

Run with:
    python -m jee_syllabus.interfaces.web_app
"""

from dataclasses import replace
from pathlib import Path

from fastapi import Depends, FastAPI, HTTPException, Query
from pydantic import BaseModel, ConfigDict, Field
from rich.console import Console

from jee_syllabus.config import SEEDS_DIR, WEB_HOST, WEB_PORT, SeederConfig, default_config
from jee_syllabus.seeding.report import build_report
from jee_syllabus.seeding.seeder import SyllabusSeeder
from jee_syllabus.seeding.syllabus_files import (
    SyllabusFileError,
    coerce_syllabus,
    get_import_stats,
    get_syllabus_preview,
    list_syllabus_files,
    read_syllabus_file,
    resolve_seed_path,
    validate_syllabus_data,
)
from jee_syllabus.storage.database import create_session_factory
from jee_syllabus.storage.upsert import UpsertError

console = Console()


class ImportOptions(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    abort_on_error: bool = Field(False, alias="abortOnError")
    fuzzy_matching: bool = Field(False, alias="fuzzyMatching")
    create_missing_subjects: bool = Field(True, alias="createMissingSubjects")
    create_missing_lessons: bool = Field(True, alias="createMissingLessons")
    create_missing_topics: bool = Field(True, alias="createMissingTopics")
    skip_duplicates: bool = Field(True, alias="skipDuplicates")


class ImportRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    file_path: str = Field(..., alias="filePath", min_length=1)
    options: ImportOptions = Field(default_factory=ImportOptions)


class ValidateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    syllabus_data: list | dict = Field(..., alias="syllabusData")


def _bad_request(error: Exception | str) -> HTTPException:
    return HTTPException(status_code=400, detail={"success": False, "message": str(error)})


def _import_config(config: SeederConfig, options: ImportOptions) -> SeederConfig:
    processing = config.processing
    return replace(
        config,
        processing=replace(
            processing,
            abort_on_error=options.abort_on_error,
            create_missing_subjects=options.create_missing_subjects,
            create_missing_lessons=options.create_missing_lessons,
            create_missing_topics=options.create_missing_topics,
            skip_duplicates=options.skip_duplicates,
            duplicate_prevention=replace(
                processing.duplicate_prevention, fuzzy_matching=options.fuzzy_matching
            ),
        ),
    )


def create_app(
    database_url: str | None = None,
    seeds_dir: str | Path | None = None,
    config: SeederConfig | None = None,
) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        database_url: Overrides the configured database URL
        seeds_dir: Directory holding syllabus JSON files
        config: Base configuration for import runs
    """
    config = config or default_config()
    if database_url:
        config = replace(config, database_url=database_url)
    seeds_dir = Path(seeds_dir or SEEDS_DIR)
    session_factory = create_session_factory(config.database_url)

    app = FastAPI(title="JEE Syllabus Import", version="0.1.0")

    def get_session():
        with session_factory() as session:
            yield session

    @app.get("/health")
    def health(session=Depends(get_session)):
        stats = get_import_stats(session, config.processing.stream_name)
        return {"status": "ok", "stream": config.processing.stream_name, **stats}

    @app.get("/admin/syllabus-import/files")
    def available_files():
        files = list_syllabus_files(seeds_dir)
        return {"success": True, "files": [f.to_dict() for f in files], "count": len(files)}

    @app.get("/admin/syllabus-import/preview")
    def preview_file(file: str = Query(..., min_length=1)):
        try:
            data = read_syllabus_file(seeds_dir, file)
        except SyllabusFileError as e:
            raise _bad_request(e)

        validation = validate_syllabus_data(data["subjects"])
        preview = get_syllabus_preview(data["subjects"])
        return {
            "success": True,
            "filePath": file,
            "stream": data["stream"],
            "validation": validation.to_dict(),
            "preview": preview,
            "sampleData": preview["sampleData"],
        }

    @app.post("/admin/syllabus-import/import")
    def import_syllabus(request: ImportRequest, session=Depends(get_session)):
        run_config = _import_config(config, request.options)
        seeder = SyllabusSeeder(session, run_config, console)

        try:
            syllabus = seeder.load_json(resolve_seed_path(seeds_dir, request.file_path))
        except FileNotFoundError:
            raise _bad_request(f"Syllabus file not found: {request.file_path}")
        except ValueError as e:
            raise _bad_request(e)

        try:
            results = seeder.process_syllabus_data(syllabus)
        except UpsertError as e:
            raise HTTPException(
                status_code=400,
                detail={
                    "success": False,
                    "message": str(e),
                    "result": build_report(seeder.results, request.file_path),
                },
            )

        success = not results.errors
        return {
            "success": success,
            "message": (
                "Syllabus imported successfully"
                if success
                else "Syllabus import completed with errors"
            ),
            "result": build_report(results, request.file_path),
        }

    @app.post("/admin/syllabus-import/validate")
    def validate_data(request: ValidateRequest):
        try:
            data = coerce_syllabus(request.syllabus_data)
        except SyllabusFileError as e:
            raise _bad_request(e)

        return {
            "success": True,
            "validation": validate_syllabus_data(data["subjects"]).to_dict(),
            "preview": get_syllabus_preview(data["subjects"]),
        }

    @app.get("/admin/syllabus-import/stats")
    def import_stats(stream: str | None = Query(None), session=Depends(get_session)):
        stream_name = stream or config.processing.stream_name
        return {"success": True, "stream": stream_name, "stats": get_import_stats(session, stream_name)}

    return app


def serve(host: str = WEB_HOST, port: int = WEB_PORT, database_url: str | None = None) -> None:
    """Run the API with uvicorn."""
    import uvicorn

    uvicorn.run(create_app(database_url=database_url), host=host, port=port)


if __name__ == "__main__":
    serve()
