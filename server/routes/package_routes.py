"""Package and manifest API routes."""

from fastapi import APIRouter, Depends, Query, Response, status

from common.models import FileInfo, ManifestPage, Package, PackagePatch
from server.storage import MemoryStore, StoredPackage, get_store

router = APIRouter(prefix="/packages", tags=["Packages"])


def _to_model(package: StoredPackage) -> Package:
    return Package(id=package.id, created=package.created, readonly=package.readonly)


@router.post("", response_model=Package, status_code=status.HTTP_201_CREATED)
async def create_package(store: MemoryStore = Depends(get_store)):
    """
    Create a new, empty package.

    Returns:
        - id: Package identifier
        - created: Creation time
        - readonly: Always false for a new package
    """
    return _to_model(store.create_package())


@router.get("/{package_id}", response_model=Package)
async def get_package(package_id: str, store: MemoryStore = Depends(get_store)):
    """
    Fetch package metadata.

    Raises:
        - 404: Package not found
    """
    return _to_model(store.get_package(package_id))


@router.patch("/{package_id}", response_model=Package)
async def patch_package(
    package_id: str,
    patch: PackagePatch,
    store: MemoryStore = Depends(get_store),
):
    """
    Update a package's mutable properties. Sealing is not reversible, so a
    false readonly flag is ignored.

    Raises:
        - 404: Package not found
    """
    if patch.readonly:
        return _to_model(store.seal_package(package_id))
    return _to_model(store.get_package(package_id))


@router.delete("/{package_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_package(package_id: str, store: MemoryStore = Depends(get_store)):
    """
    Delete a package and all of its files.

    Raises:
        - 404: Package not found
    """
    store.delete_package(package_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{package_id}/manifest", response_model=ManifestPage)
async def get_manifest(
    package_id: str,
    cursor: str = Query("", description="Continuation cursor from the previous page"),
    path: str = Query("", description="Only list files whose path starts with this prefix"),
    store: MemoryStore = Depends(get_store),
):
    """
    List one page of the package's files, sorted by path.

    Returns:
        - files: File metadata for this page
        - cursor: Cursor for the next page; empty on the final page

    Raises:
        - 400: Invalid cursor
        - 404: Package not found
    """
    files, next_cursor = store.list_files(package_id, prefix=path, cursor=cursor)
    return ManifestPage(
        files=[
            FileInfo(path=f.path, size=f.size, digest=f.digest, updated=f.updated)
            for f in files
        ],
        cursor=next_cursor,
    )
