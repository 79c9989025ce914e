"""Static guide written at the workspace root for editors and coding agents.

The file is never synced and the watcher ignores it.
"""

REFERENCE_DOC_NAME = "AGENTS.md"

REFERENCE_DOC = """\
# EJS Template Editing Guide

## Workspace Information

This is a **synced SleekCMS workspace**. Files are automatically synced
with the SleekCMS server.

- **File edits are auto-synced**: saved changes are pushed to the server
  about a second after the last save.
- **If a save is rejected** (for example because the template changed on
  the server), the local file is replaced with the server's copy.
- **New files** are registered with the server, which may move them to
  their canonical path. Files the server refuses are deleted.
- **The whole directory is deleted when the sync session ends.**

Templates use [EJS](https://ejs.co/) syntax. The template receives a
context object with site content and helper functions.

## Directory structure

- css/tailwind.css - tailwind config v4
- css/*.css - other styles
- js/*.js - script files
- views/blocks/*.ejs - templates for blocks (groups of fields used as a field type)
- views/entries/*.ejs - templates for entries (records referenced by other models)
- views/pages/*.ejs - templates for pages and page collections (path/[slug])
- All _index.ejs are for collections of pages and rendered for each [slug]

## Available Data

- `item`: the page, entry or block being rendered.
- `pages`: array of all pages. Each page has `_path`, `_slug` and its own fields.
- `entries`: entries keyed by handle (e.g. `entries.header`).
- `images`: images keyed by name. Each has `{ url, raw, alt }`.
- `options`: option sets keyed by name, arrays of `{ label, value }`.
- `main`: rendered HTML of the previous template in the chain (base layouts).

## Helper Functions

| Function | Description |
|---|---|
| `render(blocks)` | Render a block or section to HTML |
| `getEntry(handle)` | Get an entry by handle |
| `getPage(path)` | Get the page with the exact path |
| `getPages(path, {collection?})` | Get all pages whose path begins with the string |
| `getSlugs(path)` | Get slugs of pages under a path |
| `getImage(name)` | Get an image object by name |
| `getOptions(name)` | Get an option set by name |
| `getContent(query?)` | Get all content, or filter with a JMESPath query |
| `path(page)` | Get the URL path of a page |
| `src(image, "WxH")` | Resized image URL |
| `img(image, "WxH")` | Full `<img>` tag |
| `picture(image, "WxH")` | `<picture>` tag with dark/light variants |
| `svg(image)` | Inline SVG reference |
| `meta(attrs)`, `link(attrs)` | Add a tag to `<head>` |
| `style(css)`, `script(js)` | Add a block to `<head>` |
| `title(text)` | Set the page `<title>` |
| `seo()` | Generate SEO meta tags from the item |

## Template Types

- **main**: renders the content for the current item.
- **base**: layout wrapper; use `<%- main %>` to output the main content.

## EJS Syntax Quick Reference

- `<%= expr %>`: output escaped HTML
- `<%- expr %>`: output raw HTML (rendered blocks, images, HTML fields)
- `<% code %>`: execute JS (loops, conditionals)
"""
