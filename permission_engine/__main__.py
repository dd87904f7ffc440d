from permission_engine.main import app  # pragma: no cover

# Allows `python -m permission_engine` to serve the API with uvicorn.
if __name__ == "__main__":  # pragma: no cover
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
