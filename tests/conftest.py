import os

os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.database.connection import Base, get_db
from app.main import app
from app.models.entity import Entity, EntityImage, EntityProductMapping
from app.models.product import Category, Product, Vertical
from app.models.review import RatingReview, User
from app.models.store import Store, StoreProductMapping

TEST_DB_URL = "sqlite:///:memory:"

engine = create_engine(
    TEST_DB_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)

TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture(scope="session", autouse=True)
def create_test_database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def db():
    connection = engine.connect()
    trans = connection.begin()
    session = TestingSessionLocal(bind=connection)
    try:
        yield session
    finally:
        session.close()
        trans.rollback()
        connection.close()


@pytest.fixture()
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def _product(id, name, key_name, vertical_id, storage=None, ram=None, colour=None, category_id=1):
    return Product(
        id=id,
        name=name,
        key_name=key_name,
        image=f"https://img.example/{key_name}.webp",
        storage=storage,
        ram=ram,
        colour=colour,
        vertical_id=vertical_id,
        parent_category_id=category_id,
        mrp=99999.0,
        rating=4.4,
    )


@pytest.fixture()
def catalog(db):
    """
    Three verticals: Galaxy S23 (3 variants, no RAM values), iPhone 15
    (2 variants) and Pixel 8 (1 variant, not sold by any store).
    """
    db.add_all([
        Vertical(id=1, name="Galaxy S23"),
        Vertical(id=2, name="iPhone 15"),
        Vertical(id=3, name="Pixel 8"),
        Category(id=1, name="Mobiles"),
        Category(id=2, name="Smartphones"),
    ])
    db.flush()

    db.add_all([
        _product(1, "Samsung Galaxy S23 (128GB, Red)", "s23-128-red", 1, "128GB", None, "Red"),
        _product(2, "Samsung Galaxy S23 (256GB, Red)", "s23-256-red", 1, "256GB", None, "Red"),
        _product(3, "Samsung Galaxy S23 (128GB, Blue)", "s23-128-blue", 1, "128GB", None, "Blue"),
        _product(4, "Apple iPhone 15 (128GB, Black)", "iphone-15-128-black", 2, "128GB", "6GB", "1B1B1B"),
        _product(5, "Apple iPhone 15 (256GB, Black)", "iphone-15-256-black", 2, "256GB", "6GB", "1B1B1B"),
        _product(6, "Google Pixel 8 (128GB, Obsidian)", "pixel-8-128", 3, "128GB", "8GB", "Obsidian", category_id=None),
        Store(id=1, name="Croma", rating=4.5, latitude=12.9716, longitude=77.5946, city="Bengaluru"),
        Store(id=2, name="Reliance Digital", rating=4.2, city=None),
        Store(id=3, name="Vijay Sales", rating=4.7, latitude=13.0827, longitude=80.2707, city="Chennai"),
    ])
    db.flush()

    db.add_all([
        StoreProductMapping(id=1, store_id=1, product_id=1, price=74900,
                            offers='["7 days replacement", "GST invoice available"]',
                            affiliate_link="https://aff.example/croma/1"),
        StoreProductMapping(id=2, store_id=2, product_id=1, price=69900, offers='{"No cost EMI","Bank offer"}'),
        StoreProductMapping(id=3, store_id=1, product_id=2, price=84900, offers="free cover!!"),
        StoreProductMapping(id=4, store_id=3, product_id=3, price=72900, offers='["Exchange bonus" "Free delivery"]'),
        StoreProductMapping(id=5, store_id=1, product_id=4, price=79900),
        StoreProductMapping(id=6, store_id=2, product_id=4, price=77900),
        StoreProductMapping(id=7, store_id=2, product_id=5, price=89900),
        Entity(id=10, page="SEARCH", entity_type="POPULAR_PILLS", header="Best camera phones", rank=2),
        Entity(id=11, page="SEARCH", entity_type="POPULAR_PILLS", header="iPhone under 80k", rank=1),
        Entity(id=12, page="HOME", entity_type="RAIL", header="Trending", rank=1),
        Entity(id=13, page="HOME", entity_type="RAIL", header="New launches", rank=0),
        User(id=1, name="Asha", user_image="https://img.example/u/asha.png"),
    ])
    db.flush()

    db.add_all([
        EntityProductMapping(id=1, entity_id=11, product_id=4),
        EntityProductMapping(id=2, entity_id=11, product_id=5),
        EntityProductMapping(id=3, entity_id=12, product_id=4),
        EntityProductMapping(id=4, entity_id=12, product_id=1),
        EntityProductMapping(id=5, entity_id=13, product_id=6),
        EntityImage(id=1, entity_type="product", entity_id=1, image_type="vertical_image_gallery",
                    image_url="https://img.example/s23/front.webp"),
        EntityImage(id=2, entity_type="product", entity_id=1, image_type="vertical_image_gallery",
                    image_url="https://img.example/s23/back.webp"),
        EntityImage(id=3, entity_type="product", entity_id=1, image_type="banner",
                    image_url="https://img.example/s23/banner.webp"),
        RatingReview(id=1, entity_type="product", entity_id=1, user_id=1, review="Great camera", rating=4.5),
        RatingReview(id=2, entity_type="product", entity_id=2, user_id=None, review="Okay", rating=3.0),
    ])
    db.flush()
    return db
