import os

import uvicorn

from fitness_tracker.main import create_app

if __name__ == "__main__":
    # 로컬 UI 전용: localhost 에만 바인딩
    uvicorn.run(create_app(), host="127.0.0.1", port=int(os.getenv("PORT", "8000")))
