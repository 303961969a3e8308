"""
Run the backend with uvicorn: `python -m bigeo`.

Host and port come from HOST / PORT (default 0.0.0.0:5000).
"""

from dotenv import load_dotenv
import uvicorn

load_dotenv()

from bigeo.Core.config import settings


def main():
    uvicorn.run("bigeo.main:app", host=settings.HOST, port=settings.PORT)


if __name__ == "__main__":
    main()
