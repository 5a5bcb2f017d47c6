from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
from datetime import datetime
from dotenv import load_dotenv

# Load .env variables
load_dotenv()

# Configure base logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("naviera")

from naviera.routers import auth, sales, cancellations, boarding
from naviera.database import engine, Base, SessionLocal
from naviera.init_db import create_initial_users, create_initial_catalog
from naviera.services.email import email_service
import uvicorn

# Create database tables
Base.metadata.create_all(bind=engine)

logger.info("Inicializando usuarios y catálogo...")
db = SessionLocal()
try:
    create_initial_users(db)
    create_initial_catalog(db)
finally:
    db.close()

app = FastAPI(
    title="Naviera API",
    description="API de venta de pasajes fluviales, anulaciones y control de embarque",
    version="1.0.0",
)

if email_service.should_send():
    logger.info("Reporte de errores por email habilitado")
else:
    logger.info(
        "Reporte de errores por email deshabilitado "
        "(ENABLE_ERROR_EMAILS o SMTP sin configurar)"
    )

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth.router, prefix="/auth", tags=["authentication"])
app.include_router(sales.router, prefix="/sales", tags=["sales"])
app.include_router(
    cancellations.router, prefix="/cancellations", tags=["cancellations"]
)
app.include_router(boarding.router, prefix="/boarding", tags=["boarding"])


@app.get("/")
def read_root():
    return {"message": "Naviera API"}


# Global unhandled exception handler -> logs ERROR and sends email
@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    client = request.client.host if request.client else "unknown"
    logger.exception(
        "Unhandled error | path=%s | method=%s | client=%s",
        request.url.path,
        request.method,
        client,
    )
    email_service.send_error_email(
        {
            "path": request.url.path,
            "method": request.method,
            "client": client,
            "user": getattr(request.state, "username", "Anónimo"),
            "exception": exc,
            "timestamp": datetime.utcnow().strftime("%Y-%m-%d %H:%M:%S"),
        }
    )
    return JSONResponse(status_code=500, content={"detail": "Internal Server Error"})


if __name__ == "__main__":
    uvicorn.run("naviera.main:app", host="0.0.0.0", port=8000, reload=True)
