import uvicorn

from brij.config import load_env

if __name__ == "__main__":
    load_env()
    uvicorn.run("brij.main:app", host="127.0.0.1", port=8000)
