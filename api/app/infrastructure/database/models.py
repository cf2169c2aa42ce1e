"""
Modelos de base de datos (ORM).

Declaran el esquema de las tablas que el motor de sync escribe via psycopg
y que la API lee via SQLAlchemy async.
"""
from sqlalchemy import Column, String, Integer, DateTime, Date, Text, JSON, CheckConstraint
from sqlalchemy.sql import func

from app.infrastructure.database.session import Base


class JudgeModel(Base):
    """
    Modelo de base de datos para jueces.
    
    Espejo local de las personas de CourtListener. courtlistener_id es
    inmutable una vez asignado y UNIQUE: es la clave de existencia del sync.
    """
    
    __tablename__ = "judges"
    
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False, index=True)
    courtlistener_id = Column(String(100), nullable=True, unique=True)
    courtlistener_data = Column(JSON, nullable=True)  # Snapshot crudo del payload upstream
    
    # Derivados de la posicion activa
    court_name = Column(String(255), nullable=True)
    jurisdiction = Column(String(20), nullable=True, index=True)
    appointed_date = Column(Date, nullable=True)
    
    # Enhancement (best-effort)
    education = Column(Text, nullable=True)
    bio = Column(Text, nullable=True)
    
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), index=True)
    
    def __repr__(self):
        return f"<Judge(id={self.id}, name={self.name}, courtlistener_id={self.courtlistener_id})>"


class SyncLogModel(Base):
    """
    Modelo de base de datos para auditoria de corridas de sync.
    
    Estados posibles:
    - started: corrida en curso
    - completed: terminó (puede tener errores por entidad en result)
    - failed: error a nivel de orquestador (setup o excepción no controlada)
    """
    
    __tablename__ = "sync_logs"
    __table_args__ = (
        CheckConstraint("status IN ('started', 'completed', 'failed')", name="ck_sync_logs_status"),
    )
    
    id = Column(Integer, primary_key=True, index=True)
    sync_id = Column(String(100), nullable=False, unique=True, index=True)
    sync_type = Column(String(50), nullable=False)
    status = Column(String(20), nullable=False, index=True)
    options = Column(JSON, nullable=True)
    result = Column(JSON, nullable=True)
    error_message = Column(Text, nullable=True)
    started_at = Column(DateTime(timezone=True), nullable=True, index=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    duration_ms = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
    
    def __repr__(self):
        return f"<SyncLog(sync_id={self.sync_id}, type={self.sync_type}, status={self.status})>"
