# main.py
import os

import uvicorn

from presurvey.main import app


if __name__ == "__main__":
    # Para desarrollo local: python main.py
    uvicorn.run(
        app,
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
    )
