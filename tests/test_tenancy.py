"""Tests for tenancy management and tenant invitations."""

import pytest

from conftest import auth_headers, make_tenancy, make_user, scope_of
from tavrezsi.core.config import settings
from tavrezsi.core.database import transaction
from tavrezsi.core.exceptions import ConflictError, DependencyError
from tavrezsi.models import PasswordResetToken, PropertyTenant, User, UserRole
from tavrezsi.services.notifier import NotificationKind
from tavrezsi.services.tenancy import derive_username, invite_tenant


def _invite(client, user, property_id, email, **extra):
    return client.post(
        "/api/property-tenants",
        headers=auth_headers(user),
        json={"property_id": property_id, "email": email, **extra},
    )


# =============================================================================
# Integration Tests: Invitations
# =============================================================================


class TestInviteTenant:
    """Tests for POST /api/property-tenants with an email."""

    def test_invite_new_email(self, client, test_db, notifier, owner, property_a):
        """Test inviting an unknown email creates one user, one pending tenancy and one token."""
        response = _invite(client, owner, property_a.id, "Uj.Berlo@Example.com", name="Új Bérlő")
        assert response.status_code == 201
        data = response.json()
        assert data["is_active"] is False
        assert data["end_date"] is None
        assert data["tenant"]["email"] == "uj.berlo@example.com"
        assert data["tenant"]["name"] == "Új Bérlő"
        assert data["tenant"]["is_active"] is False

        invited = test_db.query(User).filter(User.email == "uj.berlo@example.com").all()
        assert len(invited) == 1
        assert invited[0].role == UserRole.TENANT
        assert invited[0].username == "uj.berlo"
        assert test_db.query(PropertyTenant).filter(PropertyTenant.tenant_id == invited[0].id).count() == 1
        assert test_db.query(PasswordResetToken).filter(PasswordResetToken.user_id == invited[0].id).count() == 1

        assert len(notifier.sent) == 1
        message = notifier.sent[0]
        assert message["kind"] == NotificationKind.TENANT_INVITE
        assert message["property_name"] == "Alma"
        assert "/reset-password?token=" in message["link"]

    def test_invitee_listed_as_inactive(self, client, owner, property_a):
        """Test pending invitees show up as inactive accounts."""
        _invite(client, owner, property_a.id, "pending@example.com")
        listing = client.get("/api/property-tenants", headers=auth_headers(owner)).json()
        assert listing[0]["tenant"]["is_active"] is False

    def test_invite_existing_tenant(self, client, test_db, owner, tenant, property_a):
        """Test inviting an existing tenant reuses the account."""
        response = _invite(client, owner, property_a.id, tenant.email)
        assert response.status_code == 201
        assert response.json()["tenant_id"] == tenant.id
        assert test_db.query(User).filter(User.role == UserRole.TENANT).count() == 1

    def test_invite_already_active_conflicts(self, client, test_db, owner, tenant, tenancy_a):
        """Test inviting a tenant who already rents the property."""
        response = _invite(client, owner, tenancy_a.property_id, tenant.email)
        assert response.status_code == 409
        assert response.json()["detail"] == "Tenant is already assigned to this property"
        assert test_db.query(PropertyTenant).count() == 1

    def test_invite_reopens_inactive_tenancy(self, client, test_db, owner, tenant, property_a):
        """Test a former tenancy is reopened instead of duplicated."""
        former = make_tenancy(test_db, tenant, property_a, is_active=False)
        response = _invite(client, owner, property_a.id, tenant.email)
        assert response.status_code == 201
        assert response.json()["id"] == former.id
        assert response.json()["end_date"] is None
        assert test_db.query(PropertyTenant).count() == 1

    def test_invite_non_tenant_rejected(self, client, owner, other_owner, property_a):
        """Test only tenant accounts can be invited."""
        response = _invite(client, owner, property_a.id, other_owner.email)
        assert response.status_code == 400
        assert response.json()["detail"] == "User must have tenant role"

    def test_owner_cannot_invite_to_foreign_property(self, client, owner, property_b):
        """Test owners only manage tenants of their own properties."""
        response = _invite(client, owner, property_b.id, "x@example.com")
        assert response.status_code == 403

    def test_tenant_cannot_invite(self, client, tenant, tenancy_a):
        """Test tenants cannot manage tenancies."""
        response = _invite(client, tenant, tenancy_a.property_id, "x@example.com")
        assert response.status_code == 403

    def test_missing_property(self, client, admin):
        """Test inviting to an unknown property."""
        response = _invite(client, admin, 9999, "x@example.com")
        assert response.status_code == 404

    def test_email_and_tenant_id_are_exclusive(self, client, admin, tenant, property_a):
        """Test exactly one invitation target is accepted."""
        response = client.post(
            "/api/property-tenants",
            headers=auth_headers(admin),
            json={"property_id": property_a.id, "email": tenant.email, "tenant_id": tenant.id},
        )
        assert response.status_code == 400

        response = client.post(
            "/api/property-tenants",
            headers=auth_headers(admin),
            json={"property_id": property_a.id},
        )
        assert response.status_code == 400


class TestInviteDelivery:
    """Tests for notifier failures during invitation."""

    def test_delivery_failure_rolls_back(self, client, test_db, notifier, owner, property_a):
        """Test an undeliverable invite leaves no user, tenancy or token behind."""
        notifier.failing_kinds.add(NotificationKind.TENANT_INVITE)

        response = _invite(client, owner, property_a.id, "lost@example.com")
        assert response.status_code == 500
        assert response.json()["detail"] == "Failed to send invitation email"

        assert test_db.query(User).filter(User.email == "lost@example.com").count() == 0
        assert test_db.query(PropertyTenant).count() == 0
        assert test_db.query(PasswordResetToken).count() == 0

    def test_delivery_failure_best_effort(self, client, test_db, notifier, owner, property_a, monkeypatch):
        """Test the invite is kept when delivery is configured as best-effort."""
        monkeypatch.setattr(settings, "INVITE_EMAIL_REQUIRED", False)
        notifier.failing_kinds.add(NotificationKind.TENANT_INVITE)

        response = _invite(client, owner, property_a.id, "later@example.com")
        assert response.status_code == 201
        assert test_db.query(PropertyTenant).count() == 1
        assert test_db.query(PasswordResetToken).count() == 1

    def test_service_raises_dependency_error(self, test_db, notifier, admin, property_a):
        """Test the service surfaces delivery failure as a dependency error."""
        notifier.failing_kinds.add(NotificationKind.TENANT_INVITE)
        with pytest.raises(DependencyError):
            invite_tenant(test_db, scope_of(admin), property_a.id, "gone@example.com", notifier)
        assert test_db.query(User).filter(User.email == "gone@example.com").count() == 0


# =============================================================================
# Integration Tests: Linking, Listing and Removal
# =============================================================================


class TestLinkTenant:
    """Tests for POST /api/property-tenants with a tenant_id."""

    def test_link_active_tenant(self, client, owner, tenant, property_a):
        """Test linking an activated tenant creates an active tenancy."""
        response = client.post(
            "/api/property-tenants",
            headers=auth_headers(owner),
            json={"property_id": property_a.id, "tenant_id": tenant.id},
        )
        assert response.status_code == 201
        assert response.json()["is_active"] is True
        assert response.json()["tenant"]["username"] == "tenant"

    def test_link_duplicate_conflicts(self, client, owner, tenant, tenancy_a):
        """Test a second active tenancy for the same pair is refused."""
        response = client.post(
            "/api/property-tenants",
            headers=auth_headers(owner),
            json={"property_id": tenancy_a.property_id, "tenant_id": tenant.id},
        )
        assert response.status_code == 409

    def test_link_inactive_account_rejected(self, client, test_db, owner, property_a):
        """Test accounts that never set a password must be invited instead."""
        invitee = make_user(test_db, "invitee", UserRole.TENANT, is_active=False)
        response = client.post(
            "/api/property-tenants",
            headers=auth_headers(owner),
            json={"property_id": property_a.id, "tenant_id": invitee.id},
        )
        assert response.status_code == 400

    def test_link_unknown_user(self, client, owner, property_a):
        """Test linking an unknown account."""
        response = client.post(
            "/api/property-tenants",
            headers=auth_headers(owner),
            json={"property_id": property_a.id, "tenant_id": 9999},
        )
        assert response.status_code == 404
        assert response.json()["detail"] == "Tenant not found"


class TestListAndRemove:
    """Tests for listing and ending tenancies."""

    def test_owner_lists_own_tenancies(self, client, test_db, owner, tenant, tenancy_a, property_b):
        """Test owners only see tenancies of their properties."""
        make_tenancy(test_db, make_user(test_db, "other", UserRole.TENANT), property_b)

        response = client.get("/api/property-tenants", headers=auth_headers(owner))
        assert response.status_code == 200
        data = response.json()
        assert [t["id"] for t in data] == [tenancy_a.id]
        assert data[0]["tenant"]["email"] == tenant.email

    def test_property_filter_out_of_scope(self, client, owner, property_b):
        """Test filtering by a foreign property is forbidden."""
        response = client.get(
            f"/api/property-tenants?property_id={property_b.id}",
            headers=auth_headers(owner),
        )
        assert response.status_code == 403

    def test_tenant_cannot_list(self, client, tenant, tenancy_a):
        """Test tenants cannot list tenancies."""
        response = client.get("/api/property-tenants", headers=auth_headers(tenant))
        assert response.status_code == 403

    def test_remove_ends_tenancy_and_access(self, client, test_db, owner, tenant, tenancy_a, meter_a):
        """Test ending a tenancy revokes the tenant's access immediately."""
        assert client.get(f"/api/meters/{meter_a.id}", headers=auth_headers(tenant)).status_code == 200

        response = client.delete(f"/api/property-tenants/{tenancy_a.id}", headers=auth_headers(owner))
        assert response.status_code == 204

        test_db.expire_all()
        ended = test_db.get(PropertyTenant, tenancy_a.id)
        assert ended.is_active is False
        assert ended.end_date is not None
        assert client.get(f"/api/meters/{meter_a.id}", headers=auth_headers(tenant)).status_code == 403

    def test_remove_unknown(self, client, owner):
        """Test ending an unknown tenancy."""
        response = client.delete("/api/property-tenants/9999", headers=auth_headers(owner))
        assert response.status_code == 404
        assert response.json()["detail"] == "Tenant assignment not found"

    def test_remove_foreign_tenancy(self, client, other_owner, tenancy_a):
        """Test owners cannot end tenancies on other owners' properties."""
        response = client.delete(
            f"/api/property-tenants/{tenancy_a.id}",
            headers=auth_headers(other_owner),
        )
        assert response.status_code == 403


# =============================================================================
# Unit Tests: Helpers and Constraints
# =============================================================================


class TestTenancyHelpers:
    """Tests for username derivation and the active-tenancy constraint."""

    def test_derive_username_sanitizes(self, test_db):
        """Test unsafe characters are dropped from the local part."""
        assert derive_username(test_db, "Kiss+Mari@example.com") == "kissmari"

    def test_derive_username_avoids_collisions(self, test_db, tenant):
        """Test a numeric suffix is added when the name is taken."""
        assert derive_username(test_db, "tenant@elsewhere.com") == "tenant2"

    def test_single_active_tenancy_enforced(self, test_db, tenant, tenancy_a, property_a):
        """Test the database refuses a second active row for the same pair."""
        with pytest.raises(ConflictError):
            with transaction(test_db):
                test_db.add(PropertyTenant(property_id=property_a.id, tenant_id=tenant.id, is_active=True))

    def test_historical_rows_allowed(self, test_db, tenant, tenancy_a, property_a):
        """Test any number of inactive rows may coexist with the active one."""
        make_tenancy(test_db, tenant, property_a, is_active=False)
        make_tenancy(test_db, tenant, property_a, is_active=False)
        assert test_db.query(PropertyTenant).count() == 3
