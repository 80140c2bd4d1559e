from fastapi import FastAPI
from workerplan.api.routes import plan
from workerplan.api.middleware import AuthMiddleware
from dotenv import load_dotenv

load_dotenv()
app = FastAPI()
app.add_middleware(AuthMiddleware)

app.include_router(plan.router)
