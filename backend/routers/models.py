import logging
from pathlib import Path
from typing import List

from fastapi import APIRouter, HTTPException
from fastapi.responses import FileResponse

from backend import config
from backend.models import ModelInfo

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/models", tags=["models"])

MEDIA_TYPES = {
    ".glb": "model/gltf-binary",
    ".stl": "model/stl",
}


@router.get("", response_model=List[ModelInfo])
async def list_models():
    """Return metadata for every generated ``.glb`` / ``.stl`` file."""
    output_dir: Path = config.OUTPUT_DIR
    if not output_dir.exists():
        return []

    models: list[ModelInfo] = []
    for model_file in sorted(output_dir.iterdir()):
        if model_file.suffix not in MEDIA_TYPES or not model_file.is_file():
            continue
        models.append(
            ModelInfo(
                name=model_file.stem.replace("-", " ").title(),
                filename=model_file.name,
                size_kb=round(model_file.stat().st_size / 1024, 1),
            )
        )
    return models


@router.get("/{filename}")
async def get_model(filename: str):
    """Serve a specific model file from the output directory."""
    file_path = config.OUTPUT_DIR / filename
    if (Path(filename).name != filename
            or file_path.suffix not in MEDIA_TYPES
            or not file_path.is_file()):
        raise HTTPException(status_code=404, detail="Model file not found")

    return FileResponse(
        path=str(file_path),
        media_type=MEDIA_TYPES[file_path.suffix],
        filename=filename,
    )
