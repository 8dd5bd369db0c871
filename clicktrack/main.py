from fastapi import FastAPI, HTTPException, Response
from fastapi.middleware.cors import CORSMiddleware
import uvicorn
import logging
import base64

from clicktrack.core.errors import InvalidParameters
from clicktrack.core.io import AudioIO
from clicktrack.dsp.clicks import ClickRenderer
from clicktrack.export.exporter import Exporter
from clicktrack.export.naming import FileCounter
from clicktrack.params.resolve import resolve_beat_spec, resolve_subdivisions

# Configure Logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("clicktrack")

app = FastAPI(
    title="Click Track Engine",
    version="1.0.0",
    description="Beat-synced click track generation"
)

# CORS (Allow Frontend)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# One counter for the whole service so concurrent requests get distinct names.
counter = FileCounter()
renderer = ClickRenderer()


@app.get("/health")
async def health_check():
    return {"status": "ok", "service": "clicktrack-engine"}


@app.post("/generate/clicktrack")
async def generate_clicktrack(params: dict):
    """
    Generates a click track.
    Body: {bpm} or {clicks, elapsed_seconds}, plus base_beats and optional subdivision_factor.
    Returns JSON with base64-encoded audio, the issued filename and the resolved spec.
    """
    try:
        spec = resolve_beat_spec(params)
    except InvalidParameters as e:
        raise HTTPException(status_code=422, detail=str(e))

    pcm = renderer.render(spec)
    wav_bytes = AudioIO.to_bytes(pcm)
    filename = counter.next_filename()
    logger.info("Generated %s: %d samples, %d clicks", filename, len(pcm), pcm.click_count)

    return {
        "audio": base64.b64encode(wav_bytes).decode("utf-8"),
        "filename": filename,
        "click_count": pcm.click_count,
        "num_samples": len(pcm),
        "resolved_spec": spec.to_dict(),
    }


@app.post("/export/session")
async def export_session(data: dict):
    """
    Generates a ZIP with the base track and one track per subdivision factor.
    """
    params = data.copy()
    try:
        subdivisions = resolve_subdivisions(params.pop("subdivisions", None))
        spec = resolve_beat_spec(params)
        zip_bytes = Exporter.create_session_zip(spec, subdivisions)
    except InvalidParameters as e:
        raise HTTPException(status_code=422, detail=str(e))

    return Response(
        content=zip_bytes,
        media_type="application/zip",
        headers={"Content-Disposition": "attachment; filename=clicktrack_session.zip"}
    )


if __name__ == "__main__":
    uvicorn.run("clicktrack.main:app", host="0.0.0.0", port=8000, reload=True)
