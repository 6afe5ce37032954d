"""Small product catalog mapped with SQLAlchemy, used as indexing source in tests."""

from contextlib import contextmanager
from typing import Generator, List, Optional

from sqlalchemy import Boolean, Float, ForeignKey, String, Text, create_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, Session, mapped_column, relationship, sessionmaker
from sqlalchemy.pool import StaticPool

from modelsearch.db.interfaces.base import BaseDatabase


class Base(DeclarativeBase):
    pass


class Category(Base):
    __tablename__ = "categories"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(Text)
    parent_id: Mapped[Optional[int]] = mapped_column(ForeignKey("categories.id"), nullable=True)

    parent: Mapped[Optional["Category"]] = relationship(remote_side="Category.id")


class Product(Base):
    __tablename__ = "products"

    id: Mapped[int] = mapped_column(primary_key=True)
    title: Mapped[str] = mapped_column(Text)
    sku: Mapped[str] = mapped_column(String(64))
    price: Mapped[Optional[float]] = mapped_column(Float, nullable=True)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    category_id: Mapped[Optional[int]] = mapped_column(ForeignKey("categories.id"), nullable=True)

    category: Mapped[Optional[Category]] = relationship()
    images: Mapped[List["Image"]] = relationship(order_by="Image.position")


class Image(Base):
    __tablename__ = "images"

    id: Mapped[int] = mapped_column(primary_key=True)
    product_id: Mapped[int] = mapped_column(ForeignKey("products.id"))
    alt: Mapped[str] = mapped_column(Text)
    position: Mapped[int] = mapped_column(default=0)


class InMemoryDatabase(BaseDatabase):
    """SQLite database shared by every session of one test."""

    def __init__(self):
        self.engine = None
        self.session_factory = None

    def startup(self) -> None:
        self.engine = create_engine(
            "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
        )
        Base.metadata.create_all(self.engine)
        self.session_factory = sessionmaker(bind=self.engine, expire_on_commit=False)

    def teardown(self) -> None:
        self.engine.dispose()

    @contextmanager
    def get_session(self) -> Generator[Session, None, None]:
        session = self.session_factory()
        try:
            yield session
        finally:
            session.close()


def seed(database: InMemoryDatabase) -> None:
    with database.get_session() as session:
        bearings = Category(id=1, title='{"en": "Bearings", "lv": "Gultņi"}')
        ball = Category(id=2, title='{"en": "Ball bearings", "lv": "Lodīšu gultņi"}', parent_id=1)
        session.add_all([bearings, ball])
        session.add_all(
            [
                Product(
                    id=1,
                    title='{"en": "Bearing 6204", "lv": "Gultnis 6204"}',
                    sku="6204-2RS",
                    price=4.5,
                    is_active=True,
                    category_id=2,
                    images=[
                        Image(id=2, alt='{"en": "Image 2"}', position=2),
                        Image(id=1, alt='{"en": "Image 1"}', position=1),
                    ],
                ),
                Product(id=2, title="plain title", sku="6205", price=None, is_active=False, category_id=None),
                Product(id=3, title='{"en": "Seal", "lv": null}', sku="S-1", price=1.0, is_active=True, category_id=1),
            ]
        )
        session.commit()
