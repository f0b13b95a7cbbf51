"""
URL Supplier

Fetch images from any HTTP service by filling search parameters into a URL template. Two styles of
service are supported:

- Direct: the URL answers with an image, usually after a redirect (e.g. the old Unsplash Source
  endpoints https://source.unsplash.com/featured/?{tags}). requests follows redirects for us.
- Search API: the URL answers with JSON. 'results_path' is a dotted path to the list of results
  (integer segments index into lists), and 'image_key' names the field holding the image URL in
  each result. One result is picked with the supplier's chooser and then downloaded.

Template placeholders:

    {tags}    search tags joined by 'tag_separator' (default ",")
    {ratios}  aspect ratios rendered with 'ratio_format' (default "{width}x{height}") and joined
              by 'ratio_separator' (default ",")

Both are URL quoted. requests is blocking, so calls run in a worker thread to keep fetch_one a
proper coroutine.
"""

import asyncio
import json
import random
from typing import Optional
from urllib.parse import quote_plus

import requests

from wallfetch.models import SearchParameters
from wallfetch.image_handler import ImageHandle, validate_image, InvalidImageError
from wallfetch.suppliers import register_supplier
from wallfetch.suppliers.base import (
    Chooser,
    Supplier,
    SupplierDefinitionMalformed,
    SupplierNetworkError,
    NoResultsError,
    MalformedResponseError,
    require,
)

DEFAULT_TIMEOUT = 30


def build_url(
    template: str,
    params: SearchParameters,
    tag_separator: str = ",",
    ratio_separator: str = ",",
    ratio_format: str = "{width}x{height}",
) -> str:
    """
    Fill the {tags} and {ratios} placeholders of template. Separators are left unquoted so that
    e.g. a comma separated keyword list stays readable to the remote service.
    """

    tags = tag_separator.join(quote_plus(tag) for tag in params.tags)
    ratios = ratio_separator.join(
        quote_plus(ratio_format.format(width=ratio.width, height=ratio.height))
        for ratio in params.aspect_ratios
    )

    # str.replace instead of str.format so other braces in the url are left alone
    return template.replace("{tags}", tags).replace("{ratios}", ratios)


def follow_path(document, path: str):
    """
    Walk a dotted path like "data" or "response.0.images" through decoded JSON.
    """

    node = document
    for segment in path.split("."):
        if isinstance(node, list):
            try:
                node = node[int(segment)]
            except (ValueError, IndexError):
                raise MalformedResponseError(
                    f"Response has no element '{segment}' while following '{path}'."
                )
        elif isinstance(node, dict):
            if segment not in node:
                raise MalformedResponseError(
                    f"Response has no key '{segment}' while following '{path}'."
                )
            node = node[segment]
        else:
            raise MalformedResponseError(
                f"Cannot follow '{path}': '{segment}' is not inside an object or list."
            )
    return node


@register_supplier
class UrlSupplier(Supplier):

    type = "url"

    def __init__(
        self,
        name: str,
        url: str,
        results_path: Optional[str] = None,
        image_key: Optional[str] = None,
        tag_separator: str = ",",
        ratio_separator: str = ",",
        ratio_format: str = "{width}x{height}",
        headers: Optional[dict] = None,
        timeout: float = DEFAULT_TIMEOUT,
        chooser: Chooser = random.choice,
    ):
        super().__init__(name, chooser=chooser)
        self.url = url
        self.results_path = results_path
        self.image_key = image_key
        self.tag_separator = tag_separator
        self.ratio_separator = ratio_separator
        self.ratio_format = ratio_format
        self.headers = headers or {}
        self.timeout = timeout

    @classmethod
    def from_definition(cls, name: str, definition: dict, chooser: Chooser = random.choice):

        results_path = require(definition, "results_path", str, default="", name=name)
        image_key = require(definition, "image_key", str, default="", name=name)

        if image_key and not results_path:
            raise SupplierDefinitionMalformed(
                f"Supplier '{name}' sets 'image_key' without 'results_path'."
            )

        return cls(
            name,
            url=require(definition, "url", str, name=name),
            results_path=results_path or None,
            image_key=image_key or None,
            tag_separator=require(definition, "tag_separator", str, default=",", name=name),
            ratio_separator=require(definition, "ratio_separator", str, default=",", name=name),
            ratio_format=require(
                definition, "ratio_format", str, default="{width}x{height}", name=name
            ),
            headers=require(definition, "headers", dict, default={}, name=name),
            timeout=require(
                definition, "timeout", (int, float), default=DEFAULT_TIMEOUT, name=name
            ),
            chooser=chooser,
        )

    def build_url(self, params: SearchParameters) -> str:
        return build_url(
            self.url,
            params,
            tag_separator=self.tag_separator,
            ratio_separator=self.ratio_separator,
            ratio_format=self.ratio_format,
        )

    def get(self, url: str) -> requests.Response:
        """
        GET url, turning transport errors and bad status codes into SupplierNetworkError.
        """

        try:
            r = requests.get(url, headers=self.headers, timeout=self.timeout)

        except requests.exceptions.RequestException as error:
            raise SupplierNetworkError(f"Request to {url} failed: {error}")

        # successful request but received a bad response from the server.
        try:
            r.raise_for_status()
        except requests.exceptions.HTTPError:
            raise SupplierNetworkError(
                f"Download error: something went wrong trying to access {url} (status code {r.status_code})"
            )

        return r

    def pick_image_url(self, response: requests.Response) -> str:
        try:
            document = response.json()
        except (json.JSONDecodeError, ValueError):
            raise MalformedResponseError(
                f"Supplier '{self.name}' expected JSON from {response.url}."
            )

        results = follow_path(document, self.results_path)

        if not isinstance(results, list):
            raise MalformedResponseError(
                f"'{self.results_path}' in response from {response.url} is not a list."
            )

        if not results:
            raise NoResultsError(
                f"Supplier '{self.name}' found no images for this search."
            )

        result = self.chooser(results)

        if self.image_key is not None:
            if not isinstance(result, dict) or self.image_key not in result:
                raise MalformedResponseError(
                    f"Result from {response.url} has no '{self.image_key}' field."
                )
            result = result[self.image_key]

        if not isinstance(result, str) or not result:
            raise MalformedResponseError(
                f"Result from {response.url} does not contain an image url."
            )

        return result

    def download(self, url: str) -> ImageHandle:
        r = self.get(url)

        # successful request but did not get back image data as the response.
        try:
            format = validate_image(r.content)
        except InvalidImageError:
            raise MalformedResponseError(
                f"Download error: the target resource at {url} does not appear to be an image."
            )

        # r.url is the last effective url hit in a redirect sequence
        return ImageHandle(content=r.content, format=format, source=r.url or url)

    def fetch(self, params: SearchParameters) -> ImageHandle:
        url = self.build_url(params)

        if self.results_path is None:
            return self.download(url)

        return self.download(self.pick_image_url(self.get(url)))

    async def fetch_one(self, params: SearchParameters) -> ImageHandle:
        return await asyncio.to_thread(self.fetch, params)
