"""Ownership rules for marketplace resources.

Each rule looks at the caller's identity (a user id taken from a verified
token, or ``None`` for anonymous callers), the resource instance and the
requested action. Existence is always checked before ownership, so a missing
resource is reported as 404 even when the caller would not own it.

Ids are compared as opaque strings.
"""

from typing import Optional

from fastapi import HTTPException
from starlette import status

from marketplace.db.models import Item, Review, Transaction, User

# (resource type, action) -> attribute holding the owning identity
OWNER_FIELDS = {
	(User, "update"): "id",
	(Item, "update"): "seller_id",
	(Item, "delete"): "seller_id",
	(Transaction, "update_status"): "buyer_id",
	(Review, "delete"): "author_id",
}

ACTION_VERBS = {
	"update": "update",
	"delete": "delete",
	"update_status": "update the status of",
}

RESOURCE_LABELS = {
	User: "User",
	Item: "Item",
	Transaction: "Transaction",
	Review: "Review",
}

def owner_of(resource, action: str) -> str:
	try:
		field = OWNER_FIELDS[(type(resource), action)]
	except KeyError:
		raise ValueError(f"No ownership rule for {type(resource).__name__}.{action}")
	return str(getattr(resource, field))

def is_owner(identity: Optional[str], resource, action: str) -> bool:
	if identity is None:
		return False
	return str(identity) == owner_of(resource, action)

def ensure_found(resource, label: str):
	if resource is None:
		raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{label} not found")
	return resource

def authorize(identity: Optional[str], resource, action: str, label: Optional[str] = None):
	"""Return ``resource`` if ``identity`` may perform ``action`` on it.

	Raises 404 when the resource is missing and 403 when the caller is not
	its owner for that action.
	"""
	label = label or RESOURCE_LABELS.get(type(resource), "Resource")
	ensure_found(resource, label)
	if not is_owner(identity, resource, action):
		raise HTTPException(
			status_code=status.HTTP_403_FORBIDDEN,
			detail=f"Not authorized to {ACTION_VERBS.get(action, action)} this {label.lower()}",
		)
	return resource

def authorize_history(identity: str, user_id: str) -> None:
	# transaction history is only readable by the user it belongs to
	if str(identity) != str(user_id):
		raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized to view this history")

def authorize_purchase(identity: str, item: Optional[Item]) -> Item:
	item = ensure_found(item, "Item")
	if str(identity) == str(item.seller_id):
		raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot buy your own item")
	return item

def authorize_review(identity: str, item: Optional[Item]) -> Item:
	item = ensure_found(item, "Item")
	if str(identity) == str(item.seller_id):
		raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="You cannot review your own item")
	return item
