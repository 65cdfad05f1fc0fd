import pytest
from flask_jwt_extended import create_access_token

from dms import create_app
from dms.extensions import db
from dms.models import Document, DocumentSet, DocumentSetDocument, Page, Tenant, User
from dms.plugins.context import HookContext


@pytest.fixture
def app(tmp_path):
    app = create_app("testing")
    app.config["UPLOAD_FOLDER"] = str(tmp_path / "uploads")

    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def tenant(app):
    tenant = Tenant(name="Acme Council", slug="acme")
    db.session.add(tenant)
    db.session.commit()
    return tenant


def _make_user(tenant, email, role="editor", permissions=None, is_active=True):
    user = User(
        email=email,
        role=role,
        tenant_id=tenant.id,
        permissions=permissions or [],
        is_active=is_active,
    )
    user.set_password("secret")
    db.session.add(user)
    db.session.commit()
    return user


@pytest.fixture
def admin_user(tenant):
    return _make_user(tenant, "admin@acme.test", role="admin")


@pytest.fixture
def editor(tenant):
    return _make_user(tenant, "editor@acme.test")


@pytest.fixture
def document_admin(tenant):
    return _make_user(
        tenant, "docs@acme.test", permissions=["CMS_ACCESS_DOCUMENT_ADMIN"]
    )


@pytest.fixture
def context(tenant, admin_user):
    return HookContext(tenant_id=tenant.id, current_user=admin_user)


@pytest.fixture
def make_page(tenant):
    def factory(title, slug=None, status="draft"):
        page = Page(
            tenant_id=tenant.id,
            title=title,
            slug=slug or title.lower().replace(" ", "-"),
            status=status,
        )
        db.session.add(page)
        db.session.commit()
        return page

    return factory


@pytest.fixture
def make_document(tenant):
    def factory(title, embargoed=False, file_url=None, filename=None):
        document = Document(
            tenant_id=tenant.id,
            title=title,
            filename=filename or f"{title.lower().replace(' ', '-')}.pdf",
            file_url=file_url,
            embargoed_until_published=embargoed,
        )
        db.session.add(document)
        db.session.commit()
        return document

    return factory


@pytest.fixture
def make_set(tenant):
    counter = {"order": 0}

    def factory(title, page=None, documents=()):
        counter["order"] += 1
        document_set = DocumentSet(
            tenant_id=tenant.id,
            title=title,
            page_id=page.id if page else None,
            sort_order=counter["order"],
        )
        db.session.add(document_set)
        db.session.flush()

        for position, document in enumerate(documents, start=1):
            db.session.add(DocumentSetDocument(
                document_set_id=document_set.id,
                document_id=document.id,
                sort_order=position,
            ))

        db.session.commit()
        return document_set

    return factory


@pytest.fixture
def auth_headers(tenant):
    def factory(user):
        token = create_access_token(
            identity=user.id,
            additional_claims={"tenant_id": user.tenant_id, "role": user.role},
        )
        return {
            "Authorization": f"Bearer {token}",
            "X-Tenant-ID": tenant.id,
        }

    return factory
